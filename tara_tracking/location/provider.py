"""Device location provider boundary.

The platform location service is an external collaborator. Components in this
package talk to it through :class:`LocationProvider`; the
:class:`ReplayLocationProvider` implementation feeds a recorded track and is
used by the offline replay command and the tests.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Protocol

from ..geo import haversine_between
from ..models import LocationSample

LOGGER = logging.getLogger(__name__)

LocationCallback = Callable[[LocationSample], None]


class PermissionStatus(Enum):
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


@dataclass(frozen=True)
class WatchOptions:
    min_interval_seconds: float
    min_distance_meters: float


class Subscription(Protocol):
    def remove(self) -> None: ...


class LocationProvider(Protocol):
    def request_foreground_permission(self) -> PermissionStatus: ...

    def watch_position(
        self, options: WatchOptions, callback: LocationCallback
    ) -> Subscription: ...


class _ReplaySubscription:
    def __init__(
        self,
        provider: "ReplayLocationProvider",
        options: WatchOptions,
        callback: LocationCallback,
    ) -> None:
        self._provider = provider
        self.options = options
        self.callback = callback
        self.last_delivered: Optional[LocationSample] = None

    def accepts(self, sample: LocationSample) -> bool:
        """Apply the watch options: both the interval and displacement must pass."""

        previous = self.last_delivered
        if previous is None:
            return True
        if sample.timestamp - previous.timestamp < self.options.min_interval_seconds:
            return False
        return haversine_between(previous, sample) >= self.options.min_distance_meters

    def remove(self) -> None:
        self._provider._remove(self)


class ReplayLocationProvider:
    """Location provider that replays a recorded list of samples."""

    def __init__(
        self,
        samples: Iterable[LocationSample] = (),
        *,
        permission: PermissionStatus = PermissionStatus.GRANTED,
    ) -> None:
        self._samples: List[LocationSample] = list(samples)
        self._permission = permission
        self._subscriptions: List[_ReplaySubscription] = []
        self._lock = threading.Lock()
        self.permission_requests = 0

    def request_foreground_permission(self) -> PermissionStatus:
        self.permission_requests += 1
        return self._permission

    def watch_position(
        self, options: WatchOptions, callback: LocationCallback
    ) -> _ReplaySubscription:
        subscription = _ReplaySubscription(self, options, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    @property
    def active_subscriptions(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def emit(self, sample: LocationSample) -> int:
        """Deliver one sample to every subscriber whose options accept it."""

        with self._lock:
            targets = list(self._subscriptions)
        delivered = 0
        for subscription in targets:
            if not subscription.accepts(sample):
                LOGGER.debug("Dropping sample %s (watch options)", sample)
                continue
            subscription.last_delivered = sample
            subscription.callback(sample)
            delivered += 1
        return delivered

    def play(self) -> int:
        """Emit every recorded sample in order; return the number delivered."""

        return sum(self.emit(sample) for sample in self._samples)

    def _remove(self, subscription: _ReplaySubscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)


__all__ = [
    "LocationCallback",
    "LocationProvider",
    "PermissionStatus",
    "ReplayLocationProvider",
    "Subscription",
    "WatchOptions",
]
