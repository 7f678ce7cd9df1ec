"""Travelled-distance accumulator fed by device location samples."""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..config import LOCATION_MIN_DISTANCE_METERS, LOCATION_MIN_INTERVAL_SECONDS
from ..errors import LocationPermissionError
from ..geo import haversine_between
from ..models import DistanceState, LocationSample
from .provider import LocationProvider, PermissionStatus, Subscription, WatchOptions

LOGGER = logging.getLogger(__name__)

DistanceListener = Callable[[float], None]


class DistanceAccumulator:
    """Sum great-circle distance between consecutive location samples.

    The first sample after activation is only a baseline. Permission denial
    leaves the accumulator inert at 0 metres and raises only when ``activate``
    is called with ``strict=True``.
    """

    def __init__(
        self,
        provider: LocationProvider,
        *,
        options: WatchOptions | None = None,
    ) -> None:
        self._provider = provider
        self._options = options or WatchOptions(
            min_interval_seconds=LOCATION_MIN_INTERVAL_SECONDS,
            min_distance_meters=LOCATION_MIN_DISTANCE_METERS,
        )
        self._state = DistanceState()
        self._lock = threading.Lock()
        self._subscription: Optional[Subscription] = None
        self._listeners: List[DistanceListener] = []
        self.permission_denied = False

    @property
    def total_meters(self) -> float:
        with self._lock:
            return self._state.total_meters

    @property
    def state(self) -> DistanceState:
        with self._lock:
            return DistanceState(self._state.total_meters, self._state.last_sample)

    @property
    def is_active(self) -> bool:
        return self._subscription is not None

    def subscribe(self, listener: DistanceListener) -> Callable[[], None]:
        """Register a listener called with the new total; returns an unsubscribe."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def activate(self, *, strict: bool = False) -> bool:
        """Request permission and start watching; False when permission is denied.

        With ``strict=True`` a denial raises :class:`LocationPermissionError`
        instead; the accumulator is left inert either way.
        """

        if self._subscription is not None:
            return True
        status = self._provider.request_foreground_permission()
        if status is not PermissionStatus.GRANTED:
            self.permission_denied = True
            LOGGER.warning("Permission to access location was denied (%s)", status.value)
            if strict:
                raise LocationPermissionError(
                    f"Foreground location permission {status.value}"
                )
            return False
        self.permission_denied = False
        self._subscription = self._provider.watch_position(
            self._options, self.add_sample
        )
        LOGGER.info(
            "Distance tracking started (interval=%.1fs distance=%.1fm)",
            self._options.min_interval_seconds,
            self._options.min_distance_meters,
        )
        return True

    def deactivate(self) -> None:
        if self._subscription is not None:
            self._subscription.remove()
            self._subscription = None
            LOGGER.info("Distance tracking stopped at %.1fm", self.total_meters)
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._state = DistanceState()

    def add_sample(self, sample: LocationSample) -> float:
        """Add a sample and return the distance it contributed (0 for the baseline).

        Samples are ignored while location permission is denied.
        """

        if self.permission_denied:
            return 0.0
        with self._lock:
            previous = self._state.last_sample
            increment = 0.0 if previous is None else haversine_between(previous, sample)
            self._state.total_meters += increment
            self._state.last_sample = sample
            total = self._state.total_meters
        if previous is not None:
            LOGGER.debug("Moved %.1fm, total %.1fm", increment, total)
            for listener in list(self._listeners):
                listener(total)
        return increment


__all__ = ["DistanceAccumulator", "DistanceListener"]
