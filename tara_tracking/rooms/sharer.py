"""Periodic publishing of the user's position to a group / tour room."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..api_client.rooms import RoomAPI
from ..config import LOCATION_SHARE_INTERVAL_SECONDS, REQUEST_TIMEOUT
from ..models import LocationSample, Room, UserSession

LOGGER = logging.getLogger(__name__)

SessionProvider = Callable[[], Optional[UserSession]]
PositionProvider = Callable[[], Optional[LocationSample]]


class LocationSharer:
    """Send the current position to a room every interval while sharing is on.

    Switching sharing off sends one last update flagged
    ``isSharingLocation=false`` so other members stop seeing the marker.
    Publish failures are logged and never raised.
    """

    def __init__(
        self,
        room: Room,
        session_provider: SessionProvider,
        position_provider: PositionProvider,
        *,
        api: RoomAPI | None = None,
        interval: float = LOCATION_SHARE_INTERVAL_SECONDS,
        enabled: bool = True,
        sharing: bool = False,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.room = room
        self._api = api or RoomAPI()
        self._session_provider = session_provider
        self._position_provider = position_provider
        self._interval = interval
        self._enabled = enabled
        self._sharing = sharing
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_sharing(self) -> bool:
        return self._sharing

    @property
    def is_updating(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        if not (self._enabled and self.room.room_id and self._sharing):
            LOGGER.info(
                "Room location updates disabled (enabled=%s room=%s sharing=%s)",
                self._enabled,
                self.room.room_id,
                self._sharing,
            )
            return False
        if self.is_updating:
            return True
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name=f"{self.room.kind.value}-share-{self.room.room_id}",
            daemon=True,
        )
        LOGGER.info(
            "Starting %s location updates for %s", self.room.kind.value, self.room.room_id
        )
        self._thread.start()
        return True

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            LOGGER.info(
                "Stopping %s location updates for %s",
                self.room.kind.value,
                self.room.room_id,
            )
        self._thread = None

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if enabled:
            self.start()
        else:
            self.stop()

    def set_sharing(self, value: bool) -> None:
        """Toggle sharing; turning it off publishes a final hidden update first."""

        if not value and self._sharing:
            self._sharing = False
            thread = self._thread
            self.stop()
            # The hidden update must be the last one the backend sees.
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout=REQUEST_TIMEOUT)
            if self._publish(is_sharing=False):
                LOGGER.info("Final location update sent for %s", self.room.room_id)
        self._sharing = value
        LOGGER.info("Location sharing toggled: %s", value)
        if value:
            self.start()

    def send_update(self) -> bool:
        return self._publish(is_sharing=self._sharing)

    def _publish(self, *, is_sharing: bool) -> bool:
        user = self._session_provider()
        position = self._position_provider()
        if user is None or not user.access_token or position is None:
            LOGGER.info(
                "Skipping location update: missing data (token=%s position=%s)",
                bool(user and user.access_token),
                position is not None,
            )
            return False
        try:
            self._api.update_room_location(
                self.room, user, position, is_sharing=is_sharing
            )
        except Exception as exc:
            LOGGER.error("Failed to update room location: %s", exc)
            return False
        LOGGER.debug(
            "Location sent to %s %s (%.5f, %.5f)",
            self.room.kind.value,
            self.room.room_id,
            position.latitude,
            position.longitude,
        )
        return True

    def _run(self, stop_event: threading.Event) -> None:
        self.send_update()
        while not stop_event.wait(self._interval):
            self.send_update()


__all__ = ["LocationSharer", "PositionProvider", "SessionProvider"]
