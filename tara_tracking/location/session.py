"""Route tracking session: distance accumulator plus route timer."""

from __future__ import annotations

import logging
from typing import Optional

from ..models import ActiveRoute
from .distance import DistanceAccumulator
from .timer import RouteTimer

LOGGER = logging.getLogger(__name__)


class TrackingSession:
    """Start and stop distance + time tracking together with the active route."""

    def __init__(
        self,
        accumulator: DistanceAccumulator,
        timer: RouteTimer,
        *,
        tick_in_background: bool = False,
    ) -> None:
        self.accumulator = accumulator
        self.timer = timer
        self._tick_in_background = tick_in_background
        self._route: Optional[ActiveRoute] = None

    @property
    def is_tracking(self) -> bool:
        return self.timer.active

    @property
    def elapsed_seconds(self) -> int:
        return self.timer.elapsed

    @property
    def distance_meters(self) -> float:
        return self.accumulator.total_meters

    @property
    def route(self) -> Optional[ActiveRoute]:
        return self._route

    def set_active_route(self, route: Optional[ActiveRoute]) -> None:
        self._route = route
        if route is None:
            self.stop()
        else:
            self.start()

    def start(self) -> None:
        if self.is_tracking:
            return
        # The timer runs even when location permission is denied.
        self.accumulator.activate()
        self.timer.set_active(True)
        if self._tick_in_background:
            self.timer.start_ticking()
        LOGGER.info("Route tracking started")

    def stop(self) -> None:
        if not self.is_tracking and not self.accumulator.is_active:
            return
        self.accumulator.deactivate()
        self.timer.set_active(False)
        LOGGER.info("Route tracking stopped")


__all__ = ["TrackingSession"]
