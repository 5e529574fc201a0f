"""
Bounded retry with linear backoff.

The delay after the n-th failed attempt is ``n * delay_step`` seconds
(2 s, 4 s, ... with the default step), not exponential.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

from fundi_feeds.errors import FeedError
from fundi_feeds.lib import logs

LOG = logs.logger(__file__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY_STEP = 2.0


class RetryPolicy:
    """
    Wraps a coroutine call with a bounded number of attempts.

    Only ``FeedError`` subclasses flagged as retryable are retried; any
    other exception propagates from the attempt that raised it.

    Attributes:
        max_attempts: Total number of attempts, including the first.
        delay_step: Seconds multiplied by the attempt number between tries.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        delay_step: float = DEFAULT_DELAY_STEP,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.max_attempts = max(max_attempts, 1)
        self.delay_step = delay_step
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        """Return the wait after the given (1-indexed) failed attempt."""
        return attempt * self.delay_step

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Call ``operation`` until it succeeds or attempts run out.

        Raises:
            FeedError: The error from the last attempt.
        """
        attempt = 1
        while True:
            try:
                return await operation()
            except FeedError as e:
                if not e.retryable or attempt >= self.max_attempts:
                    if attempt > 1:
                        LOG.error(
                            "Giving up after %d attempts: %s", attempt, e.message
                        )
                    raise
                delay = self.delay_for(attempt)
                LOG.warning(
                    "Attempt %d/%d failed (%s), retrying in %.0fs",
                    attempt,
                    self.max_attempts,
                    e.message,
                    delay,
                )
                await self._sleep(delay)
                attempt += 1
