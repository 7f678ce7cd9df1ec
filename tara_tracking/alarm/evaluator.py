"""Stop-proximity alarm state machine.

idle -> triggered (distance to the next stop <= threshold) -> dismissed -> idle

Only one alarm is visible at a time. While it is visible, new samples refresh
the distance but fire no side effects. After a dismissal the same stop never
fires again; the alarm re-arms when the route plan moves on to a different
next stop. Advancing the route is the plan owner's job, not the evaluator's.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Sequence

from ..config import (
    STOP_ALARM_DEFAULT_THRESHOLD_M,
    STOP_ALARM_ENABLED,
    STOP_ALARM_MODE_THRESHOLDS_M,
)
from ..geo import haversine_between
from ..models import AlarmState, LocationSample, RouteStop

LOGGER = logging.getLogger(__name__)

AlarmListener = Callable[[AlarmState], None]


def threshold_for_mode(mode: str) -> float:
    """Alarm radius in metres for a route mode (walking 50, driving 200, ...)."""

    return STOP_ALARM_MODE_THRESHOLDS_M.get(
        (mode or "").strip().lower(), STOP_ALARM_DEFAULT_THRESHOLD_M
    )


class StopProximityEvaluator:
    def __init__(
        self,
        *,
        mode: str = "walking",
        threshold_m: float | None = None,
        enabled: bool = STOP_ALARM_ENABLED,
    ) -> None:
        self._mode = mode
        self._threshold_override = threshold_m
        self._enabled = enabled
        self._stops: List[RouteStop] = []
        self._state = AlarmState()
        self._last_alarmed: Optional[RouteStop] = None
        self._listeners: List[AlarmListener] = []
        self._lock = threading.Lock()

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def threshold_m(self) -> float:
        if self._threshold_override is not None:
            return self._threshold_override
        return threshold_for_mode(self._mode)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def state(self) -> AlarmState:
        with self._lock:
            return AlarmState(
                self._state.visible,
                self._state.next_stop,
                self._state.distance_to_next_stop,
            )

    @property
    def next_stop(self) -> Optional[RouteStop]:
        with self._lock:
            return self._stops[0] if self._stops else None

    def add_listener(self, listener: AlarmListener) -> None:
        """Register a callback fired once per idle -> triggered transition."""

        self._listeners.append(listener)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def set_mode(self, mode: str) -> None:
        self._mode = mode

    def update_stops(self, stops: Sequence[RouteStop]) -> None:
        """Replace the upcoming stops; the first entry is the next unvisited stop."""

        with self._lock:
            self._stops = list(stops)

    def evaluate(self, sample: LocationSample) -> AlarmState:
        triggered: Optional[AlarmState] = None
        with self._lock:
            if self._state.visible and self._state.next_stop is not None:
                self._state.distance_to_next_stop = haversine_between(
                    sample, self._state.next_stop
                )
                return self._snapshot()
            if not self._stops:
                return self._snapshot()

            stop = self._stops[0]
            distance = haversine_between(sample, stop)
            self._state.next_stop = stop
            self._state.distance_to_next_stop = distance
            threshold = self.threshold_m
            if (
                self._enabled
                and distance <= threshold
                and stop != self._last_alarmed
            ):
                self._state.visible = True
                self._last_alarmed = stop
                triggered = self._snapshot()
                LOGGER.info(
                    "Stop alarm: within %.0fm of %s (threshold %.0fm)",
                    distance,
                    stop.location_name,
                    threshold,
                )
            state = self._snapshot()

        if triggered is not None:
            self._notify(triggered)
        return state

    def dismiss(self) -> None:
        with self._lock:
            if not self._state.visible:
                return
            self._state.visible = False
        LOGGER.info("Stop alarm dismissed")

    def _snapshot(self) -> AlarmState:
        return AlarmState(
            self._state.visible,
            self._state.next_stop,
            self._state.distance_to_next_stop,
        )

    def _notify(self, state: AlarmState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                LOGGER.exception("Stop alarm listener failed")


__all__ = ["AlarmListener", "StopProximityEvaluator", "threshold_for_mode"]
