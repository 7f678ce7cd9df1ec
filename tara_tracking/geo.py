"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import Protocol

_EARTH_RADIUS_M = 6_371_000.0


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in metres between two WGS84 points."""

    sin = math.sin
    cos = math.cos
    radians = math.radians
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    delta_lat = lat2_rad - lat1_rad
    delta_lon = radians(lon2 - lon1)
    sin_half_lat = sin(delta_lat / 2.0)
    sin_half_lon = sin(delta_lon / 2.0)
    a = sin_half_lat**2 + cos(lat1_rad) * cos(lat2_rad) * sin_half_lon**2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return _EARTH_RADIUS_M * c


def haversine_between(first: HasCoordinates, second: HasCoordinates) -> float:
    return haversine_m(
        first.latitude, first.longitude, second.latitude, second.longitude
    )


__all__ = ["haversine_m", "haversine_between"]
