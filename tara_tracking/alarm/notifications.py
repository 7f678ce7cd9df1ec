"""Local push notification content and dispatch for stop alarms."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from ..config import STOP_ALARM_SCREEN, STOP_ALARM_VIBRATION_PATTERN
from ..errors import NotificationDispatchError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StopAlarmNotification:
    title: str
    body: str
    data: Dict[str, Any]
    sound: str = "default"
    priority: str = "high"
    vibration_pattern: List[int] = field(
        default_factory=lambda: list(STOP_ALARM_VIBRATION_PATTERN)
    )
    # None means "deliver immediately".
    trigger: Optional[Dict[str, Any]] = None

    @classmethod
    def build(
        cls, stop_name: str, distance: float, route_mode: str
    ) -> "StopAlarmNotification":
        return cls(
            title="Approaching Stop",
            body=f"{stop_name} is {round(distance)}m away on your {route_mode} route",
            data={
                "stopName": stop_name,
                "distance": distance,
                "routeMode": route_mode,
                "type": "stop_alarm",
                "screen": STOP_ALARM_SCREEN,
            },
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "content": {
                "title": self.title,
                "body": self.body,
                "sound": self.sound,
                "priority": self.priority,
                "vibrationPattern": list(self.vibration_pattern),
                "data": dict(self.data),
            },
            "trigger": self.trigger,
        }


class Notifier(Protocol):
    """Delivers notifications; raises NotificationDispatchError when delivery fails."""

    def schedule(self, notification: StopAlarmNotification) -> None: ...


class LoggingNotifier:
    """Notifier that writes notifications to the log (CLI / headless use)."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or LOGGER
        self.sent: List[StopAlarmNotification] = []

    def schedule(self, notification: StopAlarmNotification) -> None:
        self.sent.append(notification)
        self._log.info("%s: %s", notification.title, notification.body)


def dispatch_stop_alarm(
    notifier: Notifier, stop_name: str, distance: float, route_mode: str
) -> bool:
    """Send one stop alarm notification; failures are logged, never raised."""

    notification = StopAlarmNotification.build(stop_name, distance, route_mode)
    try:
        notifier.schedule(notification)
    except NotificationDispatchError as exc:
        LOGGER.error("Error sending stop alarm notification for %s: %s", stop_name, exc)
        return False
    except Exception as exc:
        LOGGER.error(
            "Error sending stop alarm notification for %s: %s",
            stop_name,
            exc,
            exc_info=True,
        )
        return False
    LOGGER.debug("Push notification sent for %s", stop_name)
    return True


__all__ = [
    "LoggingNotifier",
    "Notifier",
    "StopAlarmNotification",
    "dispatch_stop_alarm",
]
