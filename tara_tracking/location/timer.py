"""Elapsed-time counter for an active route."""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Optional

from ..config import ROUTE_TIMER_TICK_SECONDS

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


class RouteTimer:
    """Whole seconds elapsed since the route became active.

    There is no pause: deactivating clears the start time and resets the
    elapsed value to 0, and the next activation starts again from 0.
    """

    def __init__(
        self,
        clock: Clock = time.monotonic,
        *,
        tick_seconds: float = ROUTE_TIMER_TICK_SECONDS,
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        self._clock = clock
        self._tick_seconds = tick_seconds
        self._on_tick = on_tick
        self._lock = threading.Lock()
        self._started_at: Optional[float] = None
        self._elapsed = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        with self._lock:
            return self._started_at is not None

    @property
    def elapsed(self) -> int:
        """Seconds since activation, refreshed on every read."""

        return self.tick()

    def set_active(self, active: bool) -> None:
        with self._lock:
            if active:
                if self._started_at is None:
                    self._started_at = self._clock()
                    self._elapsed = 0
                return
            self._started_at = None
            self._elapsed = 0
        self._stop_ticking()

    def tick(self) -> int:
        with self._lock:
            if self._started_at is not None:
                self._elapsed = max(0, math.floor(self._clock() - self._started_at))
            return self._elapsed

    def start_ticking(self) -> None:
        """Refresh the elapsed value every tick on a daemon thread."""

        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="route-timer", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self.set_active(False)

    def _stop_ticking(self) -> None:
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._tick_seconds * 2)

    def _run(self) -> None:
        stop_event = self._stop_event
        while not stop_event.wait(self._tick_seconds):
            if not self.active:
                continue
            elapsed = self.tick()
            if self._on_tick is not None:
                try:
                    self._on_tick(elapsed)
                except Exception:  # pragma: no cover - listener bug
                    LOGGER.exception("Route timer listener failed")


__all__ = ["Clock", "RouteTimer"]
