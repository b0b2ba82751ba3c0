import pytest

from conftest import BASE_URL
from management_api import ManagementClient
from management_api.services.errors import ConfigurationError
from management_api.services.options import ClientCredentials, StaticToken
from management_api.settings import load_settings


def test_defaults():
    settings = load_settings({})

    assert settings.domain == ""
    assert settings.retry_enabled is True
    assert settings.max_retries == 10
    assert settings.token_cache_enabled is True
    assert settings.token_cache_ttl is None
    assert settings.debug is False


def test_static_token_from_environment():
    settings = load_settings(
        {"MANAGEMENT_DOMAIN": "tenant.example.com", "MANAGEMENT_API_TOKEN": "abc"}
    )

    options = settings.to_client_options()

    assert options.base_url == BASE_URL
    assert options.auth == StaticToken(token="abc")


def test_client_credentials_from_environment():
    settings = load_settings(
        {
            "MANAGEMENT_DOMAIN": "tenant.example.com",
            "MANAGEMENT_CLIENT_ID": "cid",
            "MANAGEMENT_CLIENT_SECRET": "secret",
            "MANAGEMENT_AUDIENCE": "https://tenant.example.com/api/v2/",
            "MANAGEMENT_RETRY_ENABLED": "false",
            "MANAGEMENT_MAX_RETRIES": "3",
            "MANAGEMENT_TOKEN_CACHE_TTL": "60",
            "MANAGEMENT_TIMEOUT": "5",
            "UNRELATED": "ignored",
        }
    )

    options = settings.to_client_options()

    assert isinstance(options.auth, ClientCredentials)
    assert options.auth.client_id == "cid"
    assert options.retry.enabled is False
    assert options.retry.max_retries == 3
    assert options.token_cache.ttl_seconds == 60
    assert options.timeout == 5.0


def test_missing_domain_is_configuration_error():
    with pytest.raises(ConfigurationError):
        load_settings({"MANAGEMENT_API_TOKEN": "abc"}).to_client_options()


async def test_management_client_from_settings():
    settings = load_settings(
        {"MANAGEMENT_DOMAIN": "tenant.example.com", "MANAGEMENT_API_TOKEN": "abc"}
    )

    async with ManagementClient.from_settings(settings) as management:
        assert management.factory.options.auth == StaticToken(token="abc")
