"""
RequestExecutor - Executes one HTTP operation against a resource.

Resolves the resource path, attaches the bearer token, sends the request
and normalizes every failure into the service error taxonomy.
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Mapping

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from management_api.services.errors import (
    ApiError,
    ConfigurationError,
    ManagementError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
)
from management_api.services.options import AuthConfig, ResourceOptions
from management_api.services.path import PathTemplate
from management_api.services.token_provider import TokenProvider


class Page(BaseModel):
    """A page of a collection, returned when totals are requested."""

    items: list[Any]
    total: int
    start: int
    limit: int


class RestVerbs(ABC):
    """
    CRUD verbs expressed on top of ``execute``.

    Shared by the plain and the retrying executor so both expose the same
    operation contract.
    """

    @abstractmethod
    async def execute(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        collection: bool = False,
    ) -> Any:
        pass

    async def create(self, data: Any, params: Mapping[str, Any] | None = None) -> Any:
        return await self.execute("POST", params, body=data, collection=True)

    async def get_all(self, params: Mapping[str, Any] | None = None) -> Any:
        return await self.execute("GET", params, collection=True)

    async def get(self, params: Mapping[str, Any]) -> Any:
        return await self.execute("GET", params)

    async def patch(self, params: Mapping[str, Any], data: Any) -> Any:
        return await self.execute("PATCH", params, body=data)

    async def update(self, params: Mapping[str, Any], data: Any) -> Any:
        return await self.execute("PUT", params, body=data)

    async def delete(self, params: Mapping[str, Any]) -> Any:
        return await self.execute("DELETE", params)


class RequestExecutor(RestVerbs):
    """Executes requests for one resource path template."""

    def __init__(
        self,
        base_url: str,
        path: str,
        options: ResourceOptions,
        auth: AuthConfig,
        token_provider: TokenProvider,
        http_client: Callable[[], httpx.AsyncClient],
        timeout: float | None = None,
        debug: bool = False,
    ):
        self.base_url = base_url
        self.template = PathTemplate(path)
        self.options = options
        self._auth = auth
        self._token_provider = token_provider
        self._get_http_client = http_client
        self._timeout = timeout
        self._debug = debug

    async def execute(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        collection: bool = False,
    ) -> Any:
        """
        Execute a single HTTP operation.

        Args:
            method: HTTP method
            params: Path parameters; any the template does not use go to the query
            query: Extra query parameters
            body: JSON body
            collection: Whether the operation addresses the collection

        Returns:
            Deserialized response body, or a Page for collection reads with totals

        Raises:
            ConfigurationError: If a path placeholder is unfilled
            AuthError: If no credential could be obtained
            NetworkError: If no response was received
            ApiError: If the remote answered with an error
        """
        resolved = self.template.resolve(params, collection=collection)
        query_params = {**resolved.remaining, **(query or {})}
        url = f"{self.base_url}{resolved.path}"

        token = await self._token_provider.get_credential(self._auth)
        headers = {**self.options.headers, "Authorization": f"Bearer {token}"}

        client = self._get_http_client()
        self._log(f"{method} {url} params={list(query_params)}")

        try:
            request = client.build_request(
                method,
                url,
                params=self._encode_query(query_params) or None,
                headers=headers,
                json=body,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Cannot encode {method} {url} request: {e}") from e

        try:
            response = await client.send(request)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(url, self._timeout) from e
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        if response.is_error:
            if response.status_code == 401:
                await self._token_provider.invalidate(self._auth)
            raise self._normalize_error(response)

        with_totals = collection and method == "GET" and _wants_totals(query_params)
        return self._parse_body(response, with_totals)

    def _encode_query(self, query: Mapping[str, Any]) -> dict[str, Any]:
        """Encode query values; lists are comma-joined unless repeat_params."""
        encoded: dict[str, Any] = {}
        for key, value in query.items():
            if value is None:
                continue
            if isinstance(value, bool):
                encoded[key] = "true" if value else "false"
            elif isinstance(value, (list, tuple)):
                items = [str(item) for item in value]
                encoded[key] = items if self.options.repeat_params else ",".join(items)
            else:
                encoded[key] = value
        return encoded

    def _normalize_error(self, response: httpx.Response) -> ManagementError:
        formatter = self.options.error_formatter
        try:
            data = response.json()
        except ValueError:
            data = None

        message = name = error_code = None
        if isinstance(data, dict):
            message = data.get(formatter.message)
            name = data.get(formatter.name)
            error_code = data.get("errorCode")

        message = str(message) if message else (response.text[:200] or response.reason_phrase)
        name = str(name) if name else (response.reason_phrase or "ApiError")
        retry_after = parse_retry_after(response.headers)

        logger.debug(f"HTTP {response.status_code} from {response.request.url}: {name}")

        if response.status_code == 429:
            return RateLimitError(
                message, name=name, retry_after=retry_after, error_code=error_code
            )
        return ApiError(
            message,
            name=name,
            status_code=response.status_code,
            retry_after=retry_after,
            error_code=error_code,
            retry_hint="retry-after" in response.headers,
        )

    def _parse_body(self, response: httpx.Response, with_totals: bool) -> Any:
        if response.status_code == 204 or not response.content:
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise ApiError(
                "Response body is not valid JSON",
                name="ParseError",
                status_code=response.status_code,
            ) from e

        if with_totals:
            return _to_page(data)
        return data

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[RequestExecutor] {message}")


def parse_retry_after(headers: Mapping[str, str]) -> float | None:
    """
    Read the remote backoff hint, in seconds.

    Understands ``Retry-After`` (delta seconds or HTTP date) and
    ``X-RateLimit-Reset`` (epoch seconds).
    """
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return max(0.0, float(retry_after))
        except ValueError:
            pass
        try:
            when = parsedate_to_datetime(retry_after)
        except (TypeError, ValueError):
            when = None
        if when is not None:
            if when.tzinfo is None:
                when = when.replace(tzinfo=timezone.utc)
            return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())

    reset = headers.get("x-ratelimit-reset")
    if reset:
        try:
            return max(0.0, float(reset) - time.time())
        except ValueError:
            return None

    return None


def _wants_totals(query: Mapping[str, Any]) -> bool:
    value = query.get("include_totals")
    return value is True or str(value).lower() == "true"


def _to_page(data: Any) -> Page:
    if isinstance(data, list):
        return Page(items=data, total=len(data), start=0, limit=len(data))

    if isinstance(data, dict):
        items = next((v for v in data.values() if isinstance(v, list)), [])
        try:
            return Page(
                items=items,
                total=data.get("total", len(items)),
                start=data.get("start", 0),
                limit=data.get("limit", len(items)),
            )
        except ValidationError as e:
            raise ApiError(
                "Paginated response has invalid totals", name="ParseError", status_code=200
            ) from e

    raise ApiError(
        "Paginated response has an unexpected shape", name="ParseError", status_code=200
    )
