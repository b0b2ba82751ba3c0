"""
ManagementClient - One entry point exposing every resource manager.
"""

from typing import TYPE_CHECKING, Any, Mapping

import httpx
from loguru import logger

from management_api.resources import (
    ClientGrantsManager,
    ClientsManager,
    ConnectionsManager,
    GrantsManager,
    ResourceServersManager,
    RolesManager,
    RulesManager,
    UsersManager,
)
from management_api.services.errors import ConfigurationError
from management_api.services.factory import RestClientFactory, validate_options
from management_api.services.options import (
    CacheConfig,
    ClientOptions,
    RetryConfig,
)

if TYPE_CHECKING:
    from management_api.settings import Settings


def management_options(
    domain: str | None,
    token: str | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
    audience: str | None = None,
    scope: str | None = None,
    retry: RetryConfig | Mapping[str, Any] | None = None,
    token_cache: CacheConfig | Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> ClientOptions:
    """
    Build client options for a tenant domain.

    A token, when given, is used as is and the client credentials are
    ignored. Otherwise ``client_id`` and ``client_secret`` are required.

    Raises:
        ConfigurationError: If the domain or the credentials are missing
    """
    if not domain:
        raise ConfigurationError("Must provide a domain")

    if token:
        auth: dict[str, Any] = {"token": token}
    elif client_id and client_secret:
        auth = {"domain": domain, "client_id": client_id, "client_secret": client_secret}
        if audience:
            auth["audience"] = audience
        if scope:
            auth["scope"] = scope
    else:
        raise ConfigurationError(
            "Must provide a token, or a client_id and client_secret"
        )

    host = domain.rstrip("/")
    if "://" not in host:
        host = f"https://{host}"

    options: dict[str, Any] = {"base_url": f"{host}/api/v2", "auth": auth}
    if retry is not None:
        options["retry"] = retry
    if token_cache is not None:
        options["token_cache"] = token_cache
    if headers:
        options["headers"] = dict(headers)
    if timeout is not None:
        options["timeout"] = timeout

    return validate_options(options)


class ManagementClient:
    """
    Management API client.

    Usage:
        async with ManagementClient(
            domain="tenant.example.com",
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
        ) as management:
            clients = await management.clients.get_all({"per_page": 10, "page": 0})
    """

    def __init__(
        self,
        domain: str | None = None,
        token: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        audience: str | None = None,
        scope: str | None = None,
        *,
        options: ClientOptions | Mapping[str, Any] | None = None,
        retry: RetryConfig | Mapping[str, Any] | None = None,
        token_cache: CacheConfig | Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        debug: bool = False,
    ):
        if options is None:
            options = management_options(
                domain,
                token=token,
                client_id=client_id,
                client_secret=client_secret,
                audience=audience,
                scope=scope,
                retry=retry,
                token_cache=token_cache,
                headers=headers,
                timeout=timeout,
            )

        self.factory = RestClientFactory(options, http_client=http_client, debug=debug)

        self.clients = ClientsManager(self.factory)
        self.client_grants = ClientGrantsManager(self.factory)
        self.users = UsersManager(self.factory)
        self.connections = ConnectionsManager(self.factory)
        self.roles = RolesManager(self.factory)
        self.resource_servers = ResourceServersManager(self.factory)
        self.rules = RulesManager(self.factory)
        self.grants = GrantsManager(self.factory)

        logger.debug(f"ManagementClient ready for {self.factory.options.base_url}")

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        http_client: httpx.AsyncClient | None = None,
    ) -> "ManagementClient":
        """Create a client from environment settings."""
        return cls(
            options=settings.to_client_options(),
            http_client=http_client,
            debug=settings.debug,
        )

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        await self.factory.close()

    async def __aenter__(self) -> "ManagementClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
