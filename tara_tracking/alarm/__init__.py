"""Stop-proximity alarm: evaluator, notification dispatch, modal state."""

from .evaluator import StopProximityEvaluator, threshold_for_mode
from .notifications import (
    LoggingNotifier,
    Notifier,
    StopAlarmNotification,
    dispatch_stop_alarm,
)
from .presentation import AlarmPresenter, StopAlarmModal

__all__ = [
    "AlarmPresenter",
    "LoggingNotifier",
    "Notifier",
    "StopAlarmModal",
    "StopAlarmNotification",
    "StopProximityEvaluator",
    "dispatch_stop_alarm",
    "threshold_for_mode",
]
