"""Shared backend client helpers (auth headers, endpoint URLs)."""

from __future__ import annotations

from typing import Dict

from .. import config
from ..models import RoomKind


def auth_headers(token: str | None) -> Dict[str, str]:
    """Return bearer auth headers for the session token."""

    return {"Authorization": f"Bearer {token or ''}"}


def room_url(kind: RoomKind, action: str, base_url: str | None = None) -> str:
    """Return ``<base>/<groups|tours>/<action>``."""

    base = (base_url or config.TARA_BACKEND_URL).rstrip("/")
    return f"{base}/{kind.value}/{action}"


__all__ = ["auth_headers", "room_url"]
