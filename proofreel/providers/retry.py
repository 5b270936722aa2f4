"""
Retry with exponential backoff for outbound API calls.

Only transient failures are retried: rate limits / server errors reported by
a provider, and network errors such as connection resets, timeouts or DNS
failures. Anything else propagates on the first occurrence.
"""
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx

from .clock import Clock, SYSTEM_CLOCK
from .exceptions import ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ConnectError covers refused connections and DNS resolution failures,
# ReadError / WriteError / RemoteProtocolError cover connection resets.
RETRYABLE_TRANSPORT_ERRORS = (
    httpx.ConnectError,
    httpx.TimeoutException,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)


def is_retryable(error: BaseException) -> bool:
    """Classify an error as transient."""
    if isinstance(error, ProviderError):
        return error.retryable
    return isinstance(error, RETRYABLE_TRANSPORT_ERRORS)


class RetryPolicy:
    """
    Executes an async operation with retry logic and exponential backoff.

    Delay starts at `initial_delay` and doubles after every failed attempt.
    When attempts run out the last error is re-raised unchanged, with the
    number of attempts attached as `error.attempts` and an exception note.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        clock: Optional[Clock] = None,
    ):
        self.max_attempts = max(1, max_attempts)
        self.initial_delay = initial_delay
        self.clock = clock or SYSTEM_CLOCK

    @classmethod
    def from_config(cls, config, clock: Optional[Clock] = None) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            initial_delay=config.initial_delay,
            clock=clock,
        )

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "operation",
    ) -> T:
        delay = self.initial_delay
        attempt = 0

        while True:
            attempt += 1
            try:
                return await operation()
            except Exception as e:
                if not is_retryable(e):
                    _annotate(e, attempt)
                    raise

                if attempt >= self.max_attempts:
                    _annotate(e, attempt)
                    e.add_note(f"{operation_name} failed after {attempt} attempt(s)")
                    logger.error(
                        f"[RETRY] {operation_name} failed after {attempt} attempt(s): {e}"
                    )
                    raise

                logger.warning(
                    f"[RETRY] {operation_name} failed on attempt {attempt}/{self.max_attempts}: {e} "
                    f"- retrying in {delay:.1f}s"
                )
                await self.clock.sleep(delay)
                delay *= 2


def _annotate(error: Any, attempts: int) -> None:
    try:
        error.attempts = attempts
    except AttributeError:
        pass
