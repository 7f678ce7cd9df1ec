"""Global pytest fixtures & helpers.

Adds project root to path and provides fake HTTP responses, a manual clock,
a recording notifier and coordinate helpers shared across test files.
"""
from __future__ import annotations

import json
import math
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from tara_tracking.models import LocationSample, RouteStop

EARTH_RADIUS_M = 6_371_000.0
BASE_LAT = 10.3157
BASE_LON = 123.8854


# --- Factory helpers -------------------------------------------------
def north_of(lat: float, meters: float) -> float:
    """Latitude ``meters`` due north of ``lat`` (exact for haversine)."""
    return lat + math.degrees(meters / EARTH_RADIUS_M)


def sample_at(meters_north: float, ts: float = 0.0) -> LocationSample:
    return LocationSample(north_of(BASE_LAT, meters_north), BASE_LON, ts)


def stop_at(name: str, meters_north: float) -> RouteStop:
    return RouteStop(name, north_of(BASE_LAT, meters_north), BASE_LON)


def member_payload(user_id: str, name: str, **extra):
    payload = {
        "userID": user_id,
        "username": name,
        "latitude": BASE_LAT,
        "longitude": BASE_LON,
        "isInAnEmergency": False,
        "emergencyType": "",
        "isSharingLocation": True,
        "lastUpdated": 1_700_000_000_000,
    }
    payload.update(extra)
    return payload


class FakeResp:
    """Minimal fake response matching needed parts of requests.Response."""

    def __init__(self, status_code=200, data=None, text=None):
        self.status_code = status_code
        self._data = data
        self._text = text
        self.url = "http://test/api"

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data

    @property
    def text(self):
        if self._text is not None:
            return self._text
        return json.dumps(self._data)


class FakeSession:
    """Records POST calls and replays queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class ManualClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def schedule(self, notification):
        if self.fail:
            raise RuntimeError("notification service unavailable")
        self.sent.append(notification)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()
