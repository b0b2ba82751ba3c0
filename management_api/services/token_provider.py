"""
TokenProvider - Resolves the access token for an auth configuration.

A static token passes through untouched. Client credentials are exchanged
at the domain's token endpoint, with at most one exchange in flight per
credential fingerprint and the result optionally cached until expiry.
"""

from datetime import datetime, timedelta
from typing import Callable

import httpx
from loguru import logger

from management_api.services.cache import TokenCache
from management_api.services.deduplicator import RequestDeduplicator
from management_api.services.errors import AuthError, ConfigurationError
from management_api.services.options import (
    AuthConfig,
    CacheConfig,
    ClientCredentials,
    StaticToken,
)


class TokenProvider:
    """
    Supplies bearer tokens to request executors.

    One provider (and so one cache) belongs to one factory; clients built
    from different factories never share credentials.
    """

    def __init__(
        self,
        http_client: Callable[[], httpx.AsyncClient],
        cache_config: CacheConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
        debug: bool = False,
    ):
        self._get_http_client = http_client
        self._cache_config = cache_config or CacheConfig()
        self._cache = TokenCache(clock=clock, debug=debug)
        self._deduplicator = RequestDeduplicator(debug=debug)
        self._exchange_count = 0

    @property
    def cache(self) -> TokenCache:
        return self._cache

    @property
    def exchange_count(self) -> int:
        """Number of credential exchanges actually sent."""
        return self._exchange_count

    async def get_credential(self, auth: AuthConfig) -> str:
        """
        Return an access token for ``auth``.

        Raises:
            AuthError: If the credential exchange fails
        """
        if isinstance(auth, StaticToken):
            return auth.token

        if isinstance(auth, ClientCredentials):
            return await self._client_credentials_token(auth)

        raise ConfigurationError(f"Unsupported auth configuration: {type(auth).__name__}")

    async def invalidate(self, auth: AuthConfig) -> bool:
        """Drop the cached token for ``auth``, if any."""
        if not isinstance(auth, ClientCredentials):
            return False
        return await self._cache.delete(self._cache_key(auth))

    async def close(self) -> None:
        await self._deduplicator.cancel_all()
        await self._cache.clear()

    def _cache_key(self, auth: ClientCredentials) -> str:
        return self._cache.generate_key(
            auth.issuer_url, auth.client_id, auth.resolved_audience, auth.scope
        )

    async def _client_credentials_token(self, auth: ClientCredentials) -> str:
        key = self._cache_key(auth)

        if self._cache_config.enabled:
            cached = await self._cache.get(key)
            if cached is not None:
                return cached

        async def exchange_and_store() -> str:
            token, expires_in = await self._exchange(auth)
            if self._cache_config.enabled:
                ttl = self._cache_config.ttl_seconds or expires_in
                await self._cache.set(key, token, timedelta(seconds=ttl))
            return token

        return await self._deduplicator.dedupe(key, exchange_and_store)

    async def _exchange(self, auth: ClientCredentials) -> tuple[str, float]:
        """Perform the client-credentials grant."""
        payload = {
            "grant_type": "client_credentials",
            "client_id": auth.client_id,
            "client_secret": auth.client_secret,
            "audience": auth.resolved_audience,
        }
        if auth.scope:
            payload["scope"] = auth.scope

        client = self._get_http_client()
        self._exchange_count += 1
        logger.info(f"Requesting access token from {auth.token_url} for {auth.client_id}")

        try:
            response = await client.post(auth.token_url, json=payload)
        except httpx.TimeoutException as e:
            raise AuthError(
                f"Token request to {auth.token_url} timed out", transient=True
            ) from e
        except httpx.RequestError as e:
            raise AuthError(
                f"Token request to {auth.token_url} failed: {e}", transient=True
            ) from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            message = response.reason_phrase or "Token request failed"
            if isinstance(data, dict):
                message = data.get("error_description") or data.get("error") or message
            raise AuthError(
                f"Token request failed with HTTP {response.status_code}: {message}",
                status_code=response.status_code,
                transient=response.status_code == 429,
            )

        if not isinstance(data, dict) or not isinstance(data.get("access_token"), str):
            raise AuthError(
                "Token response did not contain an access token",
                status_code=response.status_code,
            )

        expires_in = data.get("expires_in")
        if not isinstance(expires_in, (int, float)) or expires_in <= 0:
            if self._cache_config.enabled and self._cache_config.ttl_seconds is None:
                raise AuthError(
                    "Token response did not contain a valid expires_in",
                    status_code=response.status_code,
                )
            expires_in = self._cache_config.ttl_seconds or 0

        logger.debug(f"Access token for {auth.client_id} expires in {expires_in}s")
        return data["access_token"], float(expires_in)
