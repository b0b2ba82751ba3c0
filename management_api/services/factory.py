"""
RestClientFactory - Turns client options into per-resource executors.

Combines:
- TokenProvider for static or client-credentials authentication
- RequestExecutor for path resolution and error normalization
- RetryingExecutor for the configured retry policy
"""

from datetime import datetime
from typing import Any, Callable, Mapping

import httpx
from loguru import logger
from pydantic import ValidationError

from management_api.services.errors import ConfigurationError
from management_api.services.executor import RequestExecutor
from management_api.services.options import ClientOptions, ResourceOptions
from management_api.services.retry import RetryingExecutor
from management_api.services.token_provider import TokenProvider


class RestClientFactory:
    """
    Builds bound executors sharing one set of client options.

    Options are validated once, here; a factory that exists is usable.

    Usage:
        factory = RestClientFactory({
            "base_url": "https://tenant.example.com/api/v2",
            "auth": {"token": "..."},
        })

        clients = factory("/clients/:client_id", {"error_formatter": {...}})
        client = await clients.get({"client_id": "abc"})
    """

    def __init__(
        self,
        options: ClientOptions | Mapping[str, Any],
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
        debug: bool = False,
    ):
        self.options = validate_options(options)
        self._debug = debug

        self._http_client = http_client
        self._owns_http_client = http_client is None

        self.token_provider = TokenProvider(
            self._get_http_client,
            cache_config=self.options.token_cache,
            clock=clock,
            debug=debug,
        )

        self._defaults = ResourceOptions(headers=dict(self.options.headers), repeat_params=False)

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.options.timeout),
                follow_redirects=True,
            )
        return self._http_client

    def __call__(
        self,
        path: str,
        resource_options: ResourceOptions | Mapping[str, Any] | None = None,
    ) -> RetryingExecutor:
        """Create the bound executor for one resource path template."""
        options = self._merge(resource_options)

        executor = RequestExecutor(
            base_url=self.options.base_url,
            path=path,
            options=options,
            auth=self.options.auth,
            token_provider=self.token_provider,
            http_client=self._get_http_client,
            timeout=self.options.timeout,
            debug=self._debug,
        )
        logger.debug(f"Registered resource: {self.options.base_url}{path}")

        return RetryingExecutor(executor, self.options.retry)

    def _merge(
        self, resource_options: ResourceOptions | Mapping[str, Any] | None
    ) -> ResourceOptions:
        """Overlay resource overrides on a copy of the shared defaults."""
        if resource_options is None:
            return self._defaults.model_copy(deep=True)

        if isinstance(resource_options, ResourceOptions):
            overrides = resource_options.model_dump(exclude_unset=True)
        else:
            overrides = dict(resource_options)

        headers = {**self._defaults.headers, **(overrides.pop("headers", None) or {})}
        merged = {**self._defaults.model_dump(), **overrides, "headers": headers}

        try:
            return ResourceOptions.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid resource options: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        await self.token_provider.close()

        if self._http_client and self._owns_http_client:
            await self._http_client.aclose()
        self._http_client = None
        self._owns_http_client = True
        logger.debug("RestClientFactory closed")

    async def __aenter__(self) -> "RestClientFactory":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def validate_options(options: Any) -> ClientOptions:
    """
    Validate raw client options.

    Raises:
        ConfigurationError: If the options are missing or invalid
    """
    if isinstance(options, ClientOptions):
        return options

    if options is None or not isinstance(options, Mapping):
        raise ConfigurationError("Must provide client options")

    base_url = options.get("base_url")
    if base_url is None:
        raise ConfigurationError("Must provide a base URL for the API")

    if not isinstance(base_url, str) or not base_url.strip():
        raise ConfigurationError("The provided base URL is invalid")

    try:
        return ClientOptions.model_validate(dict(options))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid client options: {e}") from e


def build(
    options: ClientOptions | Mapping[str, Any],
    http_client: httpx.AsyncClient | None = None,
    debug: bool = False,
) -> RestClientFactory:
    """Validate ``options`` and return a resource executor factory."""
    return RestClientFactory(options, http_client=http_client, debug=debug)
