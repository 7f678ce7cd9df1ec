"""Fixed-interval polling of group / tour member positions.

The poller keeps the member list from the most recent successful poll. A
failed poll keeps the previous list, records an error string and leaves the
schedule untouched: the next tick is the retry.

Ordering: every poll takes a sequence number when it is issued. A response is
applied only when its number is higher than the last applied one, so a slow
response can never overwrite a newer one. Stopping (or restarting) bumps a
generation counter; responses issued under an older generation are dropped.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, List, Optional

from ..api_client.rooms import RoomAPI
from ..config import MEMBER_POLL_INTERVAL_SECONDS
from ..models import MemberLocation, Room, RoomKind

LOGGER = logging.getLogger(__name__)

MembersFetcher = Callable[[str, str], List[MemberLocation]]
TokenProvider = Callable[[], Optional[str]]
UpdateListener = Callable[[List[MemberLocation], Optional[str]], None]


class MemberPoller:
    def __init__(
        self,
        room_id: str,
        fetcher: MembersFetcher,
        token_provider: TokenProvider,
        *,
        interval: float = MEMBER_POLL_INTERVAL_SECONDS,
        enabled: bool = True,
        label: str = "room",
        on_update: UpdateListener | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.room_id = room_id
        self.label = label
        self._fetcher = fetcher
        self._token_provider = token_provider
        self._interval = interval
        self._enabled = enabled
        self._on_update = on_update

        self._lock = threading.Lock()
        self._members: List[MemberLocation] = []
        self._error: Optional[str] = None
        self._loading = True
        self._sequence = itertools.count(1)
        self._last_applied = 0
        self._generation = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.polls_issued = 0

    @classmethod
    def for_room(
        cls,
        room: Room,
        token_provider: TokenProvider,
        *,
        api: RoomAPI | None = None,
        **kwargs,
    ) -> "MemberPoller":
        """Build a poller backed by ``RoomAPI.get_room_members``."""

        room_api = api or RoomAPI()
        kind: RoomKind = room.kind

        def _fetch(room_id: str, token: str) -> List[MemberLocation]:
            return room_api.get_room_members(Room(kind, room_id), token)

        kwargs.setdefault("label", kind.value.rstrip("s"))
        return cls(room.room_id, _fetch, token_provider, **kwargs)

    # -- public state ---------------------------------------------------
    @property
    def members(self) -> List[MemberLocation]:
        with self._lock:
            return list(self._members)

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # -- lifecycle -------------------------------------------------------
    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if enabled:
            self.start()
        else:
            self.stop()

    def start(self) -> bool:
        """Poll now and then every interval; return False when preconditions fail."""

        if not self._enabled or not self.room_id:
            return False
        if not self._token_provider():
            LOGGER.info("Not polling %s members for %s: no access token", self.label, self.room_id)
            return False
        if self.is_running:
            return True
        with self._lock:
            self._generation += 1
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name=f"{self.label}-members-{self.room_id}",
            daemon=True,
        )
        LOGGER.info("Starting to fetch %s members for %s", self.label, self.room_id)
        self._thread.start()
        return True

    def stop(self) -> None:
        """Cancel the schedule; results of polls already in flight are discarded."""

        with self._lock:
            self._generation += 1
        self._stop_event.set()
        if self._thread is not None:
            LOGGER.info("Stopping %s members fetch for %s", self.label, self.room_id)
        self._thread = None

    # -- polling -----------------------------------------------------------
    def refetch(self) -> bool:
        return self.poll_once()

    def poll_once(self) -> bool:
        """Run one poll; return True when its result was applied as a success."""

        token = self._token_provider()
        if not token or not self.room_id:
            return False
        with self._lock:
            seq = next(self._sequence)
            generation = self._generation
            self.polls_issued += 1

        members: Optional[List[MemberLocation]] = None
        error: Optional[str] = None
        try:
            members = list(self._fetcher(self.room_id, token))
        except Exception as exc:
            error = str(exc) or "Failed to fetch members"
            LOGGER.warning(
                "Error fetching %s members for %s: %s", self.label, self.room_id, error
            )

        with self._lock:
            if generation != self._generation:
                LOGGER.debug("Discarding %s poll #%s issued before teardown", self.label, seq)
                return False
            if seq <= self._last_applied:
                LOGGER.debug(
                    "Discarding stale %s poll #%s (last applied #%s)",
                    self.label,
                    seq,
                    self._last_applied,
                )
                return False
            self._last_applied = seq
            self._loading = False
            if members is not None:
                self._members = members
                self._error = None
            else:
                self._error = error
            snapshot = list(self._members)
            current_error = self._error

        if self._on_update is not None:
            try:
                self._on_update(snapshot, current_error)
            except Exception:
                LOGGER.exception("%s members listener failed", self.label)
        return members is not None

    def _run(self, stop_event: threading.Event) -> None:
        self.poll_once()
        while not stop_event.wait(self._interval):
            self.poll_once()


__all__ = ["MemberPoller", "MembersFetcher", "TokenProvider"]
