"""Group / tour room endpoints (member positions and location publishing)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from ..config import REQUEST_TIMEOUT, TARA_BACKEND_URL
from ..errors import TaraAPIError, TaraPayloadError
from ..models import LocationSample, MemberLocation, Room, UserSession
from .base import auth_headers, room_url
from .response_handling import classify_response_status, safe_json
from .session import get_default_session

LOGGER = logging.getLogger(__name__)


class RoomAPI:
    """Encapsulates the room member and room location backend calls."""

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        base_url: str = TARA_BACKEND_URL,
        timeout: int = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session or get_default_session()
        self._base_url = base_url
        self._timeout = timeout

    def get_room_members(self, room: Room, token: str) -> List[MemberLocation]:
        """Return the authoritative member positions for a room.

        Raises:
            TaraAPIError: network failure or non-2xx response; the message is
                the backend ``message`` field when one is returned.
            TaraPayloadError: success response without a list under ``data``.
        """

        context = f"{room.kind.value}/get-room-members"
        data = self._post(
            context,
            room_url(room.kind, "get-room-members", self._base_url),
            token,
            {room.kind.id_field: room.room_id},
        )
        items = data.get("data") if isinstance(data, dict) else None
        if items is None:
            return []
        if not isinstance(items, list):
            raise TaraPayloadError(f"{context} returned non-list data")
        try:
            return [MemberLocation.from_payload(item) for item in items]
        except (KeyError, TypeError, ValueError) as exc:
            raise TaraPayloadError(f"{context} returned malformed member: {exc}") from exc

    def update_room_location(
        self,
        room: Room,
        user: UserSession,
        sample: LocationSample,
        *,
        is_sharing: bool,
    ) -> Any:
        """Publish the user's position to a room."""

        payload = {
            room.kind.id_field: room.room_id,
            "userID": user.user_id,
            "username": user.username,
            "latitude": sample.latitude,
            "longitude": sample.longitude,
            "isInAnEmergency": user.is_in_emergency,
            "emergencyType": user.emergency_type,
            "isSharingLocation": is_sharing,
        }
        return self._post(
            f"{room.kind.value}/update-room-location",
            room_url(room.kind, "update-room-location", self._base_url),
            user.access_token or "",
            payload,
        )

    def _post(
        self, context: str, url: str, token: str, body: Dict[str, Any]
    ) -> Any:
        LOGGER.debug("POST %s", url)
        try:
            response = self._session.post(
                url,
                headers=auth_headers(token),
                json=body,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            message = f"{context} network error: {exc.__class__.__name__}"
            raise TaraAPIError(message) from exc

        error = classify_response_status(response, context)
        if error is not None:
            raise error

        data = safe_json(response)
        if data is None:
            raise TaraPayloadError(f"{context} returned a non-JSON body")
        return data


__all__ = ["RoomAPI"]
