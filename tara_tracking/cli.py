#!/usr/bin/env python3
"""Command line entry point for the TaraG tracking client.

Usage examples:

    # Poll a group room three times and log member positions
    python -m tara_tracking members --group GROUP_ID --token ACCESS_TOKEN --polls 3

    # Replay a recorded track against a route plan (offline)
    python -m tara_tracking replay --samples track.csv --route route.json

``track.csv`` needs ``latitude``, ``longitude`` and ``timestamp`` (epoch
seconds) columns. ``route.json`` is an active route as stored by the app:
``{"mode": "walking", "location": [{"locationName": ..., "latitude": ...,
"longitude": ...}, ...]}``; the first entry is the starting point.
"""

from __future__ import annotations

import argparse
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from .alarm import AlarmPresenter, LoggingNotifier, StopProximityEvaluator
from .api_client import RoomAPI
from .config import (
    LOCATION_MIN_DISTANCE_METERS,
    LOCATION_MIN_INTERVAL_SECONDS,
    MEMBER_POLL_INTERVAL_SECONDS,
)
from .location import (
    DistanceAccumulator,
    ReplayLocationProvider,
    RouteTimer,
    WatchOptions,
)
from .models import ActiveRoute, LocationSample, Room, RoomKind
from .rooms import MemberPoller

LOGGER = logging.getLogger(__name__)

_SAMPLE_COLUMNS = ("latitude", "longitude", "timestamp")


@dataclass
class AlarmEvent:
    stop_name: str
    distance_m: float
    timestamp: float


@dataclass
class ReplayResult:
    total_meters: float
    elapsed_seconds: int
    alarms: List[AlarmEvent] = field(default_factory=list)
    notifications_sent: int = 0


def _setup_logging(verbose: bool = False) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def load_samples(path: str | Path) -> List[LocationSample]:
    frame = pd.read_csv(path)
    missing = [col for col in _SAMPLE_COLUMNS if col not in frame.columns]
    if missing:
        raise ValueError(f"{path}: missing columns {', '.join(missing)}")
    frame = frame.dropna(subset=list(_SAMPLE_COLUMNS)).sort_values("timestamp")
    return [
        LocationSample(float(row.latitude), float(row.longitude), float(row.timestamp))
        for row in frame.itertuples(index=False)
    ]


def load_route(path: str | Path) -> ActiveRoute:
    with open(path, "r", encoding="utf-8") as handle:
        return ActiveRoute.from_payload(json.load(handle))


def run_replay(
    samples: Sequence[LocationSample],
    route: ActiveRoute,
    *,
    threshold_m: float | None = None,
) -> ReplayResult:
    """Feed recorded samples through the accumulator, timer and stop alarm.

    Each alarm is acknowledged immediately and the route advances to the
    following stop, the way a traveller would tap "Got it!" and move on.
    """

    result = ReplayResult(total_meters=0.0, elapsed_seconds=0)
    if not samples:
        return result

    now = {"ts": samples[0].timestamp}
    provider = ReplayLocationProvider(samples)
    timer = RouteTimer(clock=lambda: now["ts"])
    accumulator = DistanceAccumulator(provider)
    evaluator = StopProximityEvaluator(mode=route.mode, threshold_m=threshold_m)
    notifier = LoggingNotifier()
    presenter = AlarmPresenter(evaluator, notifier, route_mode=route.mode)
    # The first stop is where the route starts.
    upcoming = list(route.stops[1:])
    evaluator.update_stops(upcoming)

    def _on_sample(sample: LocationSample) -> None:
        now["ts"] = sample.timestamp
        state = evaluator.evaluate(sample)
        if not state.visible or state.next_stop is None:
            return
        result.alarms.append(
            AlarmEvent(
                state.next_stop.location_name,
                state.distance_to_next_stop,
                sample.timestamp,
            )
        )
        presenter.dismiss()
        if upcoming and upcoming[0] == state.next_stop:
            upcoming.pop(0)
            evaluator.update_stops(upcoming)

    timer.set_active(True)
    accumulator.activate()
    provider.watch_position(
        WatchOptions(LOCATION_MIN_INTERVAL_SECONDS, LOCATION_MIN_DISTANCE_METERS),
        _on_sample,
    )
    provider.play()

    result.total_meters = accumulator.total_meters
    result.elapsed_seconds = timer.elapsed
    result.notifications_sent = presenter.notifications_sent
    timer.set_active(False)
    accumulator.deactivate()
    return result


def _cmd_replay(args: argparse.Namespace) -> int:
    try:
        samples = load_samples(args.samples)
        route = load_route(args.route)
    except (OSError, ValueError, KeyError) as exc:
        LOGGER.error("Failed to load replay inputs: %s", exc)
        return 2
    if args.mode:
        route.mode = args.mode
    result = run_replay(samples, route, threshold_m=args.threshold)
    print(f"Distance travelled: {result.total_meters / 1000.0:.2f} km")
    print(f"Elapsed route time: {result.elapsed_seconds}s")
    for alarm in result.alarms:
        print(f"Alarm: {alarm.stop_name} at {round(alarm.distance_m)}m (t={alarm.timestamp:.0f})")
    if not result.alarms:
        print("No stop alarms triggered")
    return 0


def _cmd_members(args: argparse.Namespace) -> int:
    room = (
        Room(RoomKind.GROUP, args.group)
        if args.group
        else Room(RoomKind.TOUR, args.tour)
    )
    api = RoomAPI(base_url=args.base_url) if args.base_url else RoomAPI()
    poller = MemberPoller.for_room(room, lambda: args.token, api=api)
    for index in range(max(1, args.polls)):
        if index:
            time.sleep(args.interval)
        poller.poll_once()
        if poller.error:
            LOGGER.warning("Poll %d failed: %s", index + 1, poller.error)
        members = poller.members
        LOGGER.info("Poll %d: %d members", index + 1, len(members))
        for member in members:
            LOGGER.info(
                "  %s (%.5f, %.5f)%s%s",
                member.username or member.user_id,
                member.latitude,
                member.longitude,
                "" if member.is_sharing_location else " [hidden]",
                f" EMERGENCY:{member.emergency_type}" if member.is_in_emergency else "",
            )
    return 0 if poller.error is None else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tara-tracking",
        description="TaraG live tracking and stop alarm tools.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    members = subparsers.add_parser("members", help="Poll room member positions")
    target = members.add_mutually_exclusive_group(required=True)
    target.add_argument("--group", help="Group room identifier")
    target.add_argument("--tour", help="Tour room identifier")
    members.add_argument("--token", required=True, help="Bearer access token")
    members.add_argument("--polls", type=int, default=1, help="Number of polls")
    members.add_argument(
        "--interval",
        type=float,
        default=MEMBER_POLL_INTERVAL_SECONDS,
        help="Seconds between polls",
    )
    members.add_argument("--base-url", help="Override the backend base URL")
    members.set_defaults(func=_cmd_members)

    replay = subparsers.add_parser("replay", help="Replay a recorded track offline")
    replay.add_argument("--samples", required=True, help="CSV of location samples")
    replay.add_argument("--route", required=True, help="Route plan JSON")
    replay.add_argument("--mode", help="Override the route mode")
    replay.add_argument(
        "--threshold", type=float, help="Alarm radius in metres (default: per mode)"
    )
    replay.set_defaults(func=_cmd_replay)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
