import pytest

from management_api.services.errors import ConfigurationError
from management_api.services.path import PathTemplate, resolve_path


def test_resolves_named_placeholder():
    assert resolve_path("/clients/:client_id", {"client_id": "abc"}) == "/clients/abc"


@pytest.mark.parametrize("params", [None, {}, {"client_id": None}, {"client_id": ""}])
def test_missing_placeholder_raises(params):
    with pytest.raises(ConfigurationError, match="client_id"):
        resolve_path("/clients/:client_id", params)


def test_missing_placeholder_never_leaks_into_path():
    with pytest.raises(ConfigurationError) as exc_info:
        PathTemplate("/clients/:client_id").resolve({"id": "abc"})

    assert exc_info.value.name == "ConfigurationError"


def test_collection_drops_trailing_placeholder():
    assert resolve_path("/clients/:client_id", {}, collection=True) == "/clients"
    assert resolve_path("/client-grants/:id", None, collection=True) == "/client-grants"


def test_collection_keeps_supplied_trailing_placeholder():
    assert resolve_path("/clients/:client_id", {"client_id": "abc"}, collection=True) == "/clients/abc"


def test_collection_still_requires_inner_placeholders():
    assert (
        resolve_path("/users/:id/roles/:role_id", {"id": "u1"}, collection=True)
        == "/users/u1/roles"
    )

    with pytest.raises(ConfigurationError, match="id"):
        resolve_path("/users/:id/roles/:role_id", {}, collection=True)


def test_values_are_percent_encoded():
    assert resolve_path("/users/:id", {"id": "auth0|123"}) == "/users/auth0%7C123"
    assert resolve_path("/users/:id", {"id": "a/b"}) == "/users/a%2Fb"


def test_non_string_values_are_stringified():
    assert resolve_path("/rules/:id", {"id": 42}) == "/rules/42"


def test_unused_params_are_returned():
    resolved = PathTemplate("/clients/:client_id").resolve(
        {"client_id": "abc", "fields": "name", "include_fields": True, "page": None}
    )

    assert resolved.path == "/clients/abc"
    assert resolved.remaining == {"fields": "name", "include_fields": True}


def test_template_without_placeholders():
    template = PathTemplate("/stats/daily")

    assert template.names == []
    assert template.resolve({"from": "20260101"}).remaining == {"from": "20260101"}
