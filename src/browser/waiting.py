"""Bounded poll-until-condition primitive.

All waiting in the suite goes through poll_until: interaction helpers use it
for actionability, verification helpers for their retry window, and page
objects for post-navigation conditions. There are no fixed sleeps anywhere
else.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from src.browser.errors import WaitTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Stopwatch:
    """Monotonic elapsed-time counter in milliseconds."""

    def __init__(self):
        self._start = time.monotonic()

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self._start) * 1000.0

    def remaining_ms(self, timeout_ms: float) -> float:
        return max(0.0, timeout_ms - self.elapsed_ms)


async def poll_until(
    probe: Callable[[], Awaitable[T]],
    predicate: Callable[[T], bool] = bool,
    timeout_ms: float = 5000,
    interval_ms: float = 100,
    description: str = "condition",
) -> T:
    """Await probe() until predicate(value) holds or the timeout expires.

    The probe always runs at least once. Exceptions raised by the probe are
    treated as "not yet" so transient DOM detachment does not abort a wait.

    Args:
        probe: Async callable producing the observed value
        predicate: Test applied to each observed value
        timeout_ms: Upper bound on total waiting
        interval_ms: Pause between probes
        description: Used in the timeout message

    Returns:
        The first value satisfying the predicate

    Raises:
        WaitTimeoutError: If the predicate never held within timeout_ms
    """
    watch = Stopwatch()
    last_value: Any = None
    last_error: Optional[BaseException] = None
    attempts = 0

    while True:
        attempts += 1
        try:
            last_value = await probe()
            last_error = None
            if predicate(last_value):
                logger.debug(
                    f"{description} satisfied after {watch.elapsed_ms:.0f}ms "
                    f"({attempts} probes)"
                )
                return last_value
        except asyncio.CancelledError:
            raise
        except Exception as e:
            last_error = e

        remaining = watch.remaining_ms(timeout_ms)
        if remaining <= 0:
            break
        await asyncio.sleep(min(interval_ms, remaining) / 1000.0)

    raise WaitTimeoutError(description, watch.elapsed_ms, last_value, last_error)
