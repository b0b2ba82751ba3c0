"""
Path templates with ``:name`` placeholders.

    PathTemplate("/clients/:client_id").resolve({"client_id": "abc"}).path
    # -> "/clients/abc"
"""

import re
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import quote

from management_api.services.errors import ConfigurationError

PLACEHOLDER = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class ResolvedPath:
    """A concrete path plus the parameters the template did not consume."""

    path: str
    remaining: dict[str, Any] = field(default_factory=dict)


class PathTemplate:
    """
    A resource URL template.

    Every placeholder must be filled. The only exception is a collection
    operation (create, list) on a template whose final segment is a
    placeholder: when that parameter is not supplied, the segment is dropped
    so ``/clients/:client_id`` addresses ``/clients``.
    """

    def __init__(self, template: str):
        self.template = template
        self.names: list[str] = PLACEHOLDER.findall(template)

    def resolve(
        self,
        params: Mapping[str, Any] | None = None,
        collection: bool = False,
    ) -> ResolvedPath:
        values = {k: v for k, v in (params or {}).items() if v is not None}
        template = self.template

        if collection and self.names:
            trailing = f"/:{self.names[-1]}"
            if template.endswith(trailing) and self.names[-1] not in values:
                template = template[: -len(trailing)]

        missing: list[str] = []

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            value = values.get(name)
            if value is None or value == "":
                missing.append(name)
                return match.group(0)
            return quote(str(value), safe="")

        path = PLACEHOLDER.sub(substitute, template)

        if missing:
            raise ConfigurationError(
                f"Missing path parameter(s) {', '.join(missing)} for '{self.template}'"
            )

        remaining = {k: v for k, v in values.items() if k not in self.names}
        return ResolvedPath(path=path, remaining=remaining)

    def __repr__(self) -> str:
        return f"PathTemplate({self.template!r})"


def resolve_path(
    template: str,
    params: Mapping[str, Any] | None = None,
    collection: bool = False,
) -> str:
    """Resolve a template string to a concrete path."""
    return PathTemplate(template).resolve(params, collection=collection).path
