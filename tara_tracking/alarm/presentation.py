"""Stop alarm modal state and notification side effect."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..models import AlarmState
from .evaluator import StopProximityEvaluator
from .notifications import LoggingNotifier, Notifier, dispatch_stop_alarm

LOGGER = logging.getLogger(__name__)

DEFAULT_STOP_NAME = "Next Stop"


@dataclass(frozen=True)
class StopAlarmModal:
    visible: bool
    stop_name: str
    distance_m: int
    route_label: str
    headline: str = "Your next stop is approaching"


def route_label(route_mode: str) -> str:
    mode = route_mode or "walking"
    return f"{mode[:1].upper()}{mode[1:]} Route"


class AlarmPresenter:
    """Blocking modal view of the alarm plus one notification per trigger."""

    def __init__(
        self,
        evaluator: StopProximityEvaluator,
        notifier: Notifier | None = None,
        *,
        route_mode: Optional[str] = None,
    ) -> None:
        self._evaluator = evaluator
        self._notifier = notifier or LoggingNotifier()
        self._route_mode = route_mode
        self.notifications_sent = 0
        self.notifications_failed = 0
        evaluator.add_listener(self._on_triggered)

    @property
    def route_mode(self) -> str:
        return self._route_mode or self._evaluator.mode or "walking"

    @property
    def modal(self) -> StopAlarmModal:
        state = self._evaluator.state
        stop_name = (
            state.next_stop.location_name
            if state.next_stop is not None and state.next_stop.location_name
            else DEFAULT_STOP_NAME
        )
        return StopAlarmModal(
            visible=state.visible,
            stop_name=stop_name,
            distance_m=round(state.distance_to_next_stop or 0.0),
            route_label=route_label(self.route_mode),
        )

    def dismiss(self) -> None:
        self._evaluator.dismiss()

    def _on_triggered(self, state: AlarmState) -> None:
        stop = state.next_stop
        stop_name = stop.location_name if stop and stop.location_name else DEFAULT_STOP_NAME
        if dispatch_stop_alarm(
            self._notifier, stop_name, state.distance_to_next_stop, self.route_mode
        ):
            self.notifications_sent += 1
        else:
            self.notifications_failed += 1


__all__ = ["AlarmPresenter", "StopAlarmModal", "route_label"]
