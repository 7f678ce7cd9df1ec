"""TaraG live tracking and stop alarm client."""

from .errors import TaraAPIError
from .models import (
    ActiveRoute,
    AlarmState,
    LocationSample,
    MemberLocation,
    Room,
    RoomKind,
    RouteStop,
    UserSession,
)

__all__ = [
    "ActiveRoute",
    "AlarmState",
    "LocationSample",
    "MemberLocation",
    "Room",
    "RoomKind",
    "RouteStop",
    "TaraAPIError",
    "UserSession",
]
