"""Route timer and tracking session."""

from __future__ import annotations

import threading

import pytest

from tara_tracking.location import (
    DistanceAccumulator,
    PermissionStatus,
    ReplayLocationProvider,
    RouteTimer,
    TrackingSession,
    WatchOptions,
)
from tara_tracking.models import ActiveRoute

from conftest import sample_at, stop_at


def test_inactive_timer_reports_zero(clock):
    timer = RouteTimer(clock=clock)
    clock.advance(30)
    assert timer.elapsed == 0
    assert not timer.active


@pytest.mark.parametrize("seconds", [0, 1, 5, 61])
def test_elapsed_counts_whole_seconds_since_activation(clock, seconds):
    timer = RouteTimer(clock=clock)
    timer.set_active(True)
    clock.advance(seconds + 0.4)
    assert timer.elapsed == seconds


def test_deactivate_resets_immediately_and_restarts_from_zero(clock):
    timer = RouteTimer(clock=clock)
    timer.set_active(True)
    clock.advance(42)
    assert timer.elapsed == 42
    timer.set_active(False)
    assert timer.elapsed == 0
    clock.advance(10)
    timer.set_active(True)
    clock.advance(3)
    assert timer.elapsed == 3


def test_repeated_activation_keeps_original_start(clock):
    timer = RouteTimer(clock=clock)
    timer.set_active(True)
    clock.advance(5)
    timer.set_active(True)
    clock.advance(5)
    assert timer.elapsed == 10


def test_background_ticking_invokes_listener():
    ticked = threading.Event()
    seen = []

    def on_tick(value):
        seen.append(value)
        ticked.set()

    timer = RouteTimer(tick_seconds=0.01, on_tick=on_tick)
    timer.set_active(True)
    timer.start_ticking()
    try:
        assert ticked.wait(1.0), "timer never ticked"
    finally:
        timer.stop()
    assert seen and all(isinstance(value, int) for value in seen)
    assert timer.elapsed == 0


def test_tracking_session_follows_active_route(clock):
    provider = ReplayLocationProvider()
    session = TrackingSession(
        DistanceAccumulator(provider, options=WatchOptions(0, 0)),
        RouteTimer(clock=clock),
    )
    session.set_active_route(ActiveRoute("walking", [stop_at("Start", 0)]))
    assert session.is_tracking
    provider.emit(sample_at(0, 0))
    provider.emit(sample_at(80, 10))
    clock.advance(12)
    assert session.distance_meters == pytest.approx(80.0)
    assert session.elapsed_seconds == 12

    session.set_active_route(None)
    assert not session.is_tracking
    assert session.distance_meters == 0.0
    assert session.elapsed_seconds == 0
    assert provider.active_subscriptions == 0


def test_tracking_session_times_route_without_location_permission(clock):
    provider = ReplayLocationProvider(permission=PermissionStatus.DENIED)
    session = TrackingSession(DistanceAccumulator(provider), RouteTimer(clock=clock))
    session.start()
    clock.advance(7)
    assert session.elapsed_seconds == 7
    assert session.distance_meters == 0.0
    session.stop()
    assert session.elapsed_seconds == 0
