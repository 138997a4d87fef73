"""
Bounded retry for outbound calls.

The policy is plain data so it can come from configuration, and the sleep
function is injectable so tests can run against a simulated clock.
"""

import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 2
    delay_seconds: float = 1.0
    backoff: float = 1.0  # 1.0 = fixed delay
    max_delay_seconds: float = 30.0

    def delay_for(self, attempt: int) -> float:
        """Delay before retry number `attempt` (1-based)."""
        delay = self.delay_seconds * (self.backoff ** (attempt - 1))
        return min(delay, self.max_delay_seconds)


def call_with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy,
    retry_on: Tuple[Type[Exception], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
) -> T:
    """
    Call fn until it succeeds or the policy's attempts are used up.

    Args:
        fn: Zero-argument callable
        policy: Attempt count and delay schedule
        retry_on: Exception types that trigger a retry; others propagate immediately
        sleep: Sleep function (seconds)
        on_retry: Optional callback(attempt, exception, delay) before each sleep

    Returns:
        fn's return value

    Raises:
        RetryError: If every attempt failed
    """
    attempts = max(1, policy.max_attempts)

    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retry_on as e:
            if attempt >= attempts:
                raise RetryError(f"Failed after {attempts} attempts: {e}", attempts) from e

            delay = policy.delay_for(attempt)
            if on_retry:
                on_retry(attempt, e, delay)
            logger.debug(f"Attempt {attempt}/{attempts} failed ({type(e).__name__}); retrying in {delay:.2f}s")
            sleep(delay)

    raise RetryError("Retry loop exited without a result", attempts)
