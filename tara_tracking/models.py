from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional


@dataclass(frozen=True)
class LocationSample:
    latitude: float
    longitude: float
    # Seconds since the epoch, as reported by the location provider.
    timestamp: float


@dataclass
class DistanceState:
    total_meters: float = 0.0
    last_sample: Optional[LocationSample] = None


@dataclass(frozen=True)
class MemberLocation:
    user_id: str
    username: str
    latitude: float
    longitude: float
    is_in_emergency: bool = False
    emergency_type: str = ""
    is_sharing_location: bool = False
    # Milliseconds since the epoch, as stored by the backend.
    last_updated: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MemberLocation":
        """Build a member from the backend room payload (camelCase keys)."""

        return cls(
            user_id=str(payload["userID"]),
            username=str(payload.get("username") or ""),
            latitude=float(payload["latitude"]),
            longitude=float(payload["longitude"]),
            is_in_emergency=bool(payload.get("isInAnEmergency", False)),
            emergency_type=str(payload.get("emergencyType") or ""),
            is_sharing_location=bool(payload.get("isSharingLocation", False)),
            last_updated=int(payload.get("lastUpdated") or 0),
        )


@dataclass(frozen=True)
class RouteStop:
    location_name: str
    latitude: float
    longitude: float
    note: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RouteStop":
        return cls(
            location_name=str(payload.get("locationName") or ""),
            latitude=float(payload["latitude"]),
            longitude=float(payload["longitude"]),
            note=payload.get("note"),
        )


@dataclass
class ActiveRoute:
    mode: str
    stops: List[RouteStop] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ActiveRoute":
        return cls(
            mode=str(payload.get("mode") or "walking"),
            stops=[RouteStop.from_payload(item) for item in payload.get("location", [])],
        )


@dataclass
class AlarmState:
    visible: bool = False
    next_stop: Optional[RouteStop] = None
    distance_to_next_stop: float = 0.0


class RoomKind(Enum):
    GROUP = "groups"
    TOUR = "tours"

    @property
    def id_field(self) -> str:
        """Request body key carrying the room identifier."""

        return "groupId" if self is RoomKind.GROUP else "tourId"


@dataclass(frozen=True)
class Room:
    kind: RoomKind
    room_id: str


@dataclass
class UserSession:
    access_token: str | None
    user_id: str = ""
    username: str = ""
    is_in_emergency: bool = False
    emergency_type: str = ""
