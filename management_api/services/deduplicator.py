"""
RequestDeduplicator - One in-flight credential exchange per cache key.

Callers asking for the same token while an exchange is running wait on
that exchange instead of starting their own.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

T = TypeVar("T")


class RequestDeduplicator:
    """
    Converges concurrent exchanges that share a key.

    Exchanges under distinct keys run independently. A waiter that is
    cancelled stops waiting; the shared exchange keeps running for the
    others and its outcome (token or error) reaches every remaining waiter.
    """

    def __init__(self, debug: bool = False):
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._lock = asyncio.Lock()
        self._debug = debug

    async def dedupe(self, key: str, exchange: Callable[[], Awaitable[T]]) -> T:
        """Run ``exchange`` unless one is already running for ``key``, and await it."""
        async with self._lock:
            task = self._in_flight.get(key)
            if task is None:
                self._log(f"START: {key[:12]}...")
                task = asyncio.create_task(self._run(key, exchange))
                self._in_flight[key] = task
            else:
                self._log(f"JOIN: {key[:12]}...")

        return await asyncio.shield(task)

    async def _run(self, key: str, exchange: Callable[[], Awaitable[T]]) -> T:
        try:
            return await exchange()
        finally:
            async with self._lock:
                self._in_flight.pop(key, None)

    async def cancel_all(self) -> int:
        """Cancel every running exchange; waiters see CancelledError."""
        async with self._lock:
            tasks = list(self._in_flight.values())
            self._in_flight.clear()

        for task in tasks:
            task.cancel()
        if tasks:
            self._log(f"CANCEL_ALL: {len(tasks)} exchanges cancelled")
        return len(tasks)

    def _log(self, message: str) -> None:
        if self._debug:
            logger.debug(f"[Deduplicator] {message}")
