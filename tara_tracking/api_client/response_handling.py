"""Shared HTTP response helpers for TaraG backend interactions."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..errors import (
    TaraAPIError,
    TaraAuthError,
    TaraRoomNotFoundError,
)

LOGGER = logging.getLogger(__name__)

__all__ = [
    "classify_response_status",
    "extract_error",
    "safe_json",
]


def classify_response_status(
    response: requests.Response, context: str
) -> Optional[TaraAPIError]:
    """Return the error to raise for a non-success status, or None when ok."""

    status = response.status_code
    if 200 <= status < 300:
        return None
    detail = extract_error(response)
    message = detail or f"{context} request failed (status {status})"

    if status in (401, 403):
        LOGGER.warning("%s forbidden (status %s): %s", context, status, message)
        return TaraAuthError(message)

    if status == 404:
        LOGGER.info("%s not found: %s", context, message)
        return TaraRoomNotFoundError(message)

    LOGGER.error("%s failed (status %s): %s", context, status, message)
    return TaraAPIError(message)


def extract_error(resp: Optional[requests.Response]) -> Optional[str]:
    """Return the backend ``message`` field, or trimmed body text, if present."""

    if resp is None:
        return None
    data = safe_json(resp)
    if data is None:
        return _extract_error_text(resp)
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    return str(message) if message else None


def safe_json(resp: requests.Response) -> Optional[Any]:
    """Safely parse JSON; return None if parsing fails."""

    try:
        return resp.json()
    except ValueError as exc:
        LOGGER.debug(
            "Failed to decode JSON from %s: %s", getattr(resp, "url", "?"), exc
        )
        return None


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed
