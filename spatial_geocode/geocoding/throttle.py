"""
Throttling of outbound calls to geocoding providers.

Providers such as Nominatim and Google enforce request quotas, so every
strategy waits on a Throttler before it fetches. The "last call" timestamp
lives in a ThrottleRegistry shared by all strategies of the same provider
kind, which makes the spacing hold across strategy instances (a new strategy
is built for every lookup).

The wait is a polling sleep in slices of at most one second so that a
cancelled caller gives up promptly.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Optional

DEFAULT_THROTTLE_MS = 5 * 1000
MAX_THROTTLE_MS = 60 * 60 * 1000
POLL_INTERVAL_MS = 1000

CancellationCheck = Callable[[], Optional[str]]


def never_cancelled() -> Optional[str]:
    return None


def clamp_throttle(throttle_ms: int) -> int:
    """Clamp a configured throttle to [0, 1 hour]; negative means the default."""
    throttle_ms = min(throttle_ms, MAX_THROTTLE_MS)
    if throttle_ms < 0:
        throttle_ms = DEFAULT_THROTTLE_MS
    return throttle_ms


class ThrottleState:
    """Last completed call time for one provider kind.

    The lock guards reads and writes of ``last_call_time`` only. Waiting
    callers are not serialized, so two concurrent lookups may both pass
    the throttle at nearly the same moment.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_call_time: Optional[float] = None

    @property
    def last_call_time(self) -> Optional[float]:
        with self._lock:
            return self._last_call_time

    def mark(self, now: float) -> None:
        with self._lock:
            self._last_call_time = now


class ThrottleRegistry:
    """Throttle states keyed by provider kind."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._states: Dict[str, ThrottleState] = {}

    def state_for(self, key: str) -> ThrottleState:
        with self._lock:
            state = self._states.get(key)
            if state is None:
                state = self._states[key] = ThrottleState()
            return state


# Shared by every strategy that is not handed its own registry.
DEFAULT_REGISTRY = ThrottleRegistry()


class Throttler:
    """Enforces a minimum delay between calls sharing a ThrottleState.

    Args:
        throttle_ms: Minimum spacing between calls in milliseconds.
        cancellation_check: Returns a termination reason once the caller
            has been cancelled, None otherwise.
        state: Shared last-call state for the provider kind.
        clock: Monotonic clock in seconds.
        sleeper: Sleep function taking seconds.
    """

    def __init__(
        self,
        throttle_ms: int,
        cancellation_check: Optional[CancellationCheck] = None,
        state: Optional[ThrottleState] = None,
        clock: Callable[[], float] = time.monotonic,
        sleeper: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.throttle_ms = clamp_throttle(throttle_ms)
        self.cancellation_check = cancellation_check or never_cancelled
        self.state = state if state is not None else ThrottleState()
        self.clock = clock
        self.sleeper = sleeper
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def _ms_since_last_call(self) -> Optional[float]:
        last = self.state.last_call_time
        if last is None:
            return None
        return (self.clock() - last) * 1000.0

    def wait_for_throttle(self) -> None:
        """Block until the throttle interval has passed since the last call."""
        elapsed = self._ms_since_last_call()
        while elapsed is not None and elapsed < self.throttle_ms:
            if self.cancellation_check():
                return
            ms_to_wait = self.throttle_ms - elapsed
            self.logger.debug(
                "spatial.geocode: throttling calls to geocode service for %dms", ms_to_wait
            )
            self.sleeper(min(ms_to_wait, POLL_INTERVAL_MS) / 1000.0)
            elapsed = self._ms_since_last_call()
        self.state.mark(self.clock())
