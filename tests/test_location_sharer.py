"""Location sharer: publish schedule, toggle semantics, failure tolerance."""

from __future__ import annotations

import threading
import time

from tara_tracking.errors import TaraAPIError
from tara_tracking.models import LocationSample, Room, RoomKind, UserSession
from tara_tracking.rooms import LocationSharer


class FakeRoomAPI:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.updates = []
        self.sent = threading.Event()

    def update_room_location(self, room, user, sample, *, is_sharing):
        self.updates.append((room, user.user_id, sample, is_sharing))
        self.sent.set()
        if self.fail:
            raise TaraAPIError("backend down")
        return {"message": "ok"}


USER = UserSession(access_token="tok", user_id="u1", username="ana")
HERE = LocationSample(10.3, 123.9, 0)
ROOM = Room(RoomKind.GROUP, "g1")


def _sharer(api, *, user=USER, position=HERE, **kwargs):
    return LocationSharer(ROOM, lambda: user, lambda: position, api=api, **kwargs)


def test_does_not_start_when_sharing_off():
    api = FakeRoomAPI()
    sharer = _sharer(api)
    assert sharer.start() is False
    assert api.updates == []


def test_turning_sharing_on_publishes_immediately():
    api = FakeRoomAPI()
    sharer = _sharer(api, interval=60)
    sharer.set_sharing(True)
    try:
        assert api.sent.wait(1.0)
        assert sharer.is_updating
    finally:
        sharer.stop()
    assert api.updates[0] == (ROOM, "u1", HERE, True)


def test_turning_sharing_off_sends_final_hidden_update():
    api = FakeRoomAPI()
    sharer = _sharer(api, interval=60, sharing=True)
    sharer.set_sharing(False)
    assert not sharer.is_sharing
    assert not sharer.is_updating
    assert api.updates == [(ROOM, "u1", HERE, False)]


def test_final_update_failure_still_turns_sharing_off():
    api = FakeRoomAPI(fail=True)
    sharer = _sharer(api, sharing=True)
    sharer.set_sharing(False)
    assert not sharer.is_sharing


def test_skips_update_without_position_or_token():
    api = FakeRoomAPI()
    assert _sharer(api, position=None, sharing=True).send_update() is False
    no_token = UserSession(access_token=None, user_id="u1")
    assert _sharer(api, user=no_token, sharing=True).send_update() is False
    assert api.updates == []


def test_publish_failure_is_logged_not_raised(caplog):
    api = FakeRoomAPI(fail=True)
    sharer = _sharer(api, sharing=True)
    assert sharer.send_update() is False
    assert "failed to update room location" in caplog.text.lower()


def test_disabled_sharer_stays_idle():
    api = FakeRoomAPI()
    sharer = _sharer(api, sharing=True, enabled=False)
    assert sharer.start() is False
    assert api.updates == []


class SlowRoomAPI(FakeRoomAPI):
    def __init__(self):
        super().__init__()
        self.in_flight = threading.Event()

    def update_room_location(self, room, user, sample, *, is_sharing):
        if is_sharing:
            self.in_flight.set()
            time.sleep(0.1)
        return super().update_room_location(room, user, sample, is_sharing=is_sharing)


def test_hidden_update_lands_after_in_flight_update():
    api = SlowRoomAPI()
    sharer = _sharer(api, interval=60, sharing=True)
    assert sharer.start()
    assert api.in_flight.wait(1.0)
    sharer.set_sharing(False)
    assert [update[3] for update in api.updates] == [True, False]
    assert not sharer.is_sharing
    assert sharer.send_update() is True
    assert api.updates[-1][3] is False
