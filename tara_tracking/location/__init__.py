"""Device location: provider boundary, distance accumulator, route timer."""

from .distance import DistanceAccumulator
from .provider import (
    LocationProvider,
    PermissionStatus,
    ReplayLocationProvider,
    WatchOptions,
)
from .session import TrackingSession
from .timer import RouteTimer

__all__ = [
    "DistanceAccumulator",
    "LocationProvider",
    "PermissionStatus",
    "ReplayLocationProvider",
    "RouteTimer",
    "TrackingSession",
    "WatchOptions",
]
