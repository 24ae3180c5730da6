"""Resilience primitives owned by the gateway: a circuit breaker and a slot pool."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum

from resumemate.errors import SaturationError

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half-open"


class CircuitBreaker:
    """Opens after ``threshold`` failures inside ``window`` seconds.

    While open, requests are refused until ``open_duration`` has elapsed.
    The circuit then turns half-open with its failure history cleared and
    lets exactly one probe through: success closes it, failure re-opens it.
    """

    def __init__(
        self,
        window: float = 120.0,
        threshold: int = 5,
        open_duration: float = 600.0,
        clock: Callable[[], float] = time.time,
    ):
        self.window = window
        self.threshold = threshold
        self.open_duration = open_duration
        self._clock = clock
        self._failures: list[float] = []
        self._opened_at: float | None = None
        self._state = CircuitState.CLOSED
        self._probe_in_flight = False

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def opened_at(self) -> float | None:
        return self._opened_at

    def is_open(self) -> bool:
        """Side-effect free: open and still inside the open duration."""
        return (
            self._state is CircuitState.OPEN
            and self._opened_at is not None
            and self._clock() - self._opened_at < self.open_duration
        )

    def recent_failures(self) -> int:
        now = self._clock()
        return sum(1 for t in self._failures if now - t < self.window)

    def allow_request(self) -> bool:
        if self._state is CircuitState.OPEN:
            if self.is_open():
                return False
            self._state = CircuitState.HALF_OPEN
            self._failures.clear()
            self._probe_in_flight = False
            logger.warning("Circuit half-open, allowing one probe request")

        if self._state is CircuitState.HALF_OPEN:
            if self._probe_in_flight:
                return False
            self._probe_in_flight = True
        return True

    def release_probe(self) -> None:
        """Return an unused probe (the request never reached the service)."""
        self._probe_in_flight = False

    def record_success(self) -> None:
        self._failures.clear()
        if self._state is not CircuitState.CLOSED:
            logger.warning("Circuit closed after successful probe")
        self._state = CircuitState.CLOSED
        self._opened_at = None
        self._probe_in_flight = False

    def record_failure(self) -> None:
        now = self._clock()
        self._probe_in_flight = False
        if self._state is CircuitState.HALF_OPEN:
            self._trip(now, "probe failed")
            return

        self._failures.append(now)
        self._failures = [t for t in self._failures if now - t < self.window]
        if self._state is CircuitState.CLOSED and len(self._failures) >= self.threshold:
            self._trip(now, f"{len(self._failures)} failures in {self.window:.0f}s")

    def _trip(self, now: float, why: str) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = now
        logger.warning("Circuit OPEN (%s); re-checking in %.0fs", why, self.open_duration)

    def snapshot(self) -> dict:
        return {
            "state": self._state.value,
            "circuit_open": self.is_open(),
            "recent_failures": self.recent_failures(),
            "opened_at": self._opened_at,
        }


class SlotPool:
    """Fixed number of concurrency slots. Full pool sheds load instead of queueing."""

    def __init__(self, capacity: int = 3):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._active = 0

    @property
    def active(self) -> int:
        return self._active

    def acquire(self) -> None:
        if self._active >= self.capacity:
            raise SaturationError(f"All {self.capacity} generation slots are busy")
        self._active += 1

    def release(self) -> None:
        self._active = max(0, self._active - 1)

    @contextmanager
    def slot(self) -> Iterator[None]:
        self.acquire()
        try:
            yield
        finally:
            self.release()
