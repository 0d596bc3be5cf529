"""Deadline-bounded retry policy for remote calls."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from .errors import BrokerAPIError, BrokerConnectionError, RetryTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_remote_failure(exc: BaseException) -> bool:
    """Default predicate: transport errors and failure responses are retried."""
    return isinstance(exc, (BrokerConnectionError, BrokerAPIError))


@dataclass
class RetryPolicy:
    """Retries a call until it succeeds or ``timeout`` seconds have elapsed.

    The pause between attempts starts at ``interval`` and is multiplied by
    ``backoff`` after every failure, capped at ``max_interval``. A backoff of
    1.0 gives fixed-interval polling. Exceptions rejected by ``retry_on`` are
    raised immediately.

    The call is always attempted at least once, even with a zero timeout.
    """

    timeout: float
    interval: float = 2.0
    backoff: float = 1.0
    max_interval: float = 60.0
    retry_on: Callable[[BaseException], bool] = is_remote_failure
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def calculate_delay(self, attempt: int) -> float:
        """Delay before the retry that follows failed ``attempt`` (0-based)."""
        delay = self.interval * (self.backoff ** attempt)
        return min(delay, self.max_interval)

    def call(self, func: Callable[[], T], description: str = "operation") -> T:
        """Run ``func`` under this policy and return its result.

        Raises:
            RetryTimeoutError: The deadline passed; ``last_error`` holds the
                final failure.
        """
        deadline = self.clock() + self.timeout
        attempt = 0

        while True:
            try:
                return func()
            except Exception as e:
                if not self.retry_on(e):
                    raise

                remaining = deadline - self.clock()
                if remaining <= 0:
                    raise RetryTimeoutError(
                        f"{description} did not succeed within {self.timeout:g}s: {e}",
                        last_error=e,
                    ) from e

                delay = min(self.calculate_delay(attempt), remaining)
                logger.warning(
                    f"{description} failed (attempt {attempt + 1}), retrying in {delay:.1f}s: {e}"
                )
                self.sleep(delay)
                attempt += 1
