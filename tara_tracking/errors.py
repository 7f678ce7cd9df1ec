"""Central error types used across the application."""

from __future__ import annotations


class TaraAPIError(RuntimeError):
    """Base error for TaraG backend failures (network or non-2xx)."""


class TaraAuthError(TaraAPIError):
    """Raised when the backend rejects the access token (401/403)."""


class TaraRoomNotFoundError(TaraAPIError):
    """Raised when a group or tour room does not exist."""


class TaraPayloadError(TaraAPIError):
    """Raised when a success response is not the JSON shape we expect."""


class LocationPermissionError(RuntimeError):
    """Raised when foreground location permission is required but denied."""


class NotificationDispatchError(RuntimeError):
    """Raised by notifiers that fail to deliver a local notification."""


__all__ = [
    "TaraAPIError",
    "TaraAuthError",
    "TaraRoomNotFoundError",
    "TaraPayloadError",
    "LocationPermissionError",
    "NotificationDispatchError",
]
