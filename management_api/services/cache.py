"""
TokenCache - In-memory credential cache with expiry.

Features:
- Keys derived from the credential request fingerprint
- Lazy eviction: an expired entry is dropped on the lookup that finds it
- Async lock held only around dict operations, never across I/O
"""

import asyncio
import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from loguru import logger


@dataclass
class CachedCredential:
    """A cached access token and the instant it stops being usable."""

    value: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class TokenCache:
    """
    Credential cache scoped to one factory instance.

    Usage:
        cache = TokenCache()

        key = cache.generate_key(domain, client_id, audience, scope)
        token = await cache.get(key)
        if token is None:
            token = await exchange()
            await cache.set(key, token, timedelta(seconds=expires_in))
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        debug: bool = False,
    ):
        self._entries: dict[str, CachedCredential] = {}
        self._clock = clock
        self._debug = debug
        self._lock = asyncio.Lock()
        self._stats = CacheStats()

    @staticmethod
    def generate_key(*parts: str | None) -> str:
        """Fingerprint a credential request; secrets never enter the key."""
        raw = "|".join(part or "" for part in parts)
        return hashlib.sha256(raw.encode()).hexdigest()[:32]

    async def get(self, key: str) -> str | None:
        """Return the cached token for ``key`` if present and unexpired."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                self._log(f"MISS: {key[:12]}...")
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._stats.misses += 1
                self._stats.evictions += 1
                self._log(f"EXPIRED: {key[:12]}...")
                return None

            self._stats.hits += 1
            self._log(f"HIT: {key[:12]}...")
            return entry.value

    async def set(self, key: str, value: str, ttl: timedelta) -> CachedCredential:
        """Store a token valid for ``ttl`` from now."""
        entry = CachedCredential(value=value, expires_at=self._clock() + ttl)

        async with self._lock:
            self._entries[key] = entry
            self._log(f"SET: {key[:12]}... (TTL: {ttl.total_seconds()}s)")

        return entry

    async def delete(self, key: str) -> bool:
        """Delete a specific key from cache."""
        async with self._lock:
            if key in self._entries:
                del self._entries[key]
                self._log(f"DELETE: {key[:12]}...")
                return True
            return False

    async def clear(self) -> None:
        """Clear all cache entries."""
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._log(f"CLEAR: {count} entries removed")

    def get_stats(self) -> "CacheStats":
        """Get cache statistics."""
        self._stats.size = len(self._entries)
        return self._stats

    def _log(self, message: str) -> None:
        """Log debug message if debug mode is enabled."""
        if self._debug:
            logger.debug(f"[TokenCache] {message}")


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0
