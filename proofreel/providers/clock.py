"""
Time source for retry backoff and job polling.

Swapped for a fake in tests so timeouts and delays run instantly.
"""
import asyncio
import time


class Clock:
    """Monotonic wall clock with non-blocking sleep."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


SYSTEM_CLOCK = Clock()
