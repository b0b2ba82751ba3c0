"""
Retry policy and the retrying executor.

Only transient failures are retried: network errors, rate limiting and
server errors that carry a retry-after hint. The remote hint decides the
delay when present, otherwise an exponential backoff with jitter is used.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from loguru import logger

from management_api.services.errors import ManagementError
from management_api.services.executor import RestVerbs
from management_api.services.options import RetryConfig


@dataclass(frozen=True)
class RetryDecision:
    """Whether to retry and after how many seconds."""

    retry: bool
    delay: float = 0.0


class RetryPolicy:
    """
    Decides if a failed attempt is retried.

    Usage:
        policy = RetryPolicy(RetryConfig(max_retries=3))
        decision = policy.should_retry(attempt=1, error=err)
        if decision.retry:
            await asyncio.sleep(decision.delay)
    """

    def __init__(self, config: RetryConfig | None = None, rng: random.Random | None = None):
        self.config = config or RetryConfig()
        self._rng = rng or random.Random()

    def should_retry(self, attempt: int, error: ManagementError) -> RetryDecision:
        """
        Args:
            attempt: 1-based number of the retry under consideration
            error: The failure of the previous attempt
        """
        if not self.config.enabled:
            return RetryDecision(retry=False)

        if attempt > self.config.max_retries or not error.retryable:
            return RetryDecision(retry=False)

        if error.retry_after is not None:
            return RetryDecision(retry=True, delay=error.retry_after)

        return RetryDecision(retry=True, delay=self.backoff(attempt))

    def backoff(self, attempt: int) -> float:
        """Exponential backoff with jitter, capped at ``max_delay``."""
        delay = min(self.config.max_delay, self.config.base_delay * 2 ** (attempt - 1))
        return self._rng.uniform(delay / 2, delay)


class RetryingExecutor(RestVerbs):
    """
    Wraps an executor with a retry policy, keeping the same contract.

    The backoff sleep only suspends the operation being retried, and it is
    cancellable: cancelling the caller raises ``asyncio.CancelledError``.
    """

    def __init__(
        self,
        executor: RestVerbs,
        config: RetryConfig | None = None,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.executor = executor
        self.policy = policy or RetryPolicy(config)
        self._sleep = sleep

    async def execute(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        *,
        collection: bool = False,
    ) -> Any:
        attempt = 0
        while True:
            try:
                return await self.executor.execute(
                    method, params, query, body, collection=collection
                )
            except ManagementError as e:
                attempt += 1
                decision = self.policy.should_retry(attempt, e)
                if not decision.retry:
                    raise

                logger.warning(
                    f"{method} failed with {e.name} ({e.message}), "
                    f"retry {attempt}/{self.policy.config.max_retries} in {decision.delay:.2f}s"
                )
                await self._sleep(decision.delay)
