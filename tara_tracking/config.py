"""Central configuration for the TaraG tracking client.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Overrides are read from environment variables (optionally
via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Backend settings
# ---------------------------------------------------------------------------
# Base URL of the TaraG backend API (no trailing slash).
TARA_BACKEND_URL = os.getenv("TARA_BACKEND_URL", "http://localhost:5000/api").rstrip(
    "/"
)

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_int("TARA_REQUEST_TIMEOUT", 15)

# HTTP session pool sizes.
HTTP_POOL_CONNECTIONS = 10
HTTP_POOL_MAXSIZE = 10


# ---------------------------------------------------------------------------
# Room polling / sharing
# ---------------------------------------------------------------------------
# Seconds between room member polls. Failed polls are not retried; the next
# scheduled poll is the retry.
MEMBER_POLL_INTERVAL_SECONDS = _env_float("MEMBER_POLL_INTERVAL_SECONDS", 5.0)

# Seconds between location publishes to a group/tour room.
LOCATION_SHARE_INTERVAL_SECONDS = _env_float("LOCATION_SHARE_INTERVAL_SECONDS", 10.0)


# ---------------------------------------------------------------------------
# Device location sampling
# ---------------------------------------------------------------------------
# Route timer refresh period.
ROUTE_TIMER_TICK_SECONDS = 1.0

# Watch options used by the distance accumulator.
LOCATION_MIN_INTERVAL_SECONDS = _env_float("LOCATION_MIN_INTERVAL_SECONDS", 2.0)
LOCATION_MIN_DISTANCE_METERS = _env_float("LOCATION_MIN_DISTANCE_METERS", 1.0)


# ---------------------------------------------------------------------------
# Stop alarm
# ---------------------------------------------------------------------------
# Start with the alarm switched on; the user can toggle it at runtime.
STOP_ALARM_ENABLED = _env_bool("STOP_ALARM_ENABLED", True)

# Alarm radius (metres) for modes missing from the table below.
STOP_ALARM_DEFAULT_THRESHOLD_M = _env_float("STOP_ALARM_DEFAULT_THRESHOLD_M", 100.0)

# Alarm radius (metres) per route mode.
STOP_ALARM_MODE_THRESHOLDS_M = {
    "walking": 50.0,
    "hiking": 100.0,
    "biking": 100.0,
    "cycling": 100.0,
    "driving": 200.0,
    "car": 200.0,
}

# Notification vibration pattern (milliseconds, alternating wait/vibrate).
STOP_ALARM_VIBRATION_PATTERN = [0, 500, 300, 500, 300, 500, 300, 500, 300, 500]

# Screen the app opens when the notification is tapped.
STOP_ALARM_SCREEN = "/(tabs)/maps"
