"""TaraG backend client components (session, response handling, rooms)."""

from .rooms import RoomAPI  # noqa: F401
from .session import create_default_session, get_default_session  # noqa: F401
