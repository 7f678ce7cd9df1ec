"""End-to-end scenarios through the real API client and the CLI commands."""

from __future__ import annotations

import json

import pytest
import requests

from tara_tracking import cli
from tara_tracking.api_client import RoomAPI
from tara_tracking.models import ActiveRoute, Room, RoomKind
from tara_tracking.rooms import MemberPoller

from conftest import FakeResp, FakeSession, member_payload, north_of, sample_at, stop_at, BASE_LAT, BASE_LON


def test_poll_success_then_network_failure_keeps_three_members():
    session = FakeSession(
        FakeResp(
            200,
            {"data": [member_payload(f"u{i}", f"member{i}") for i in range(3)]},
        ),
        requests.ConnectionError("wifi dropped"),
    )
    api = RoomAPI(session=session, base_url="http://backend.test/api")
    poller = MemberPoller.for_room(Room(RoomKind.GROUP, "g1"), lambda: "tok", api=api)

    poller.poll_once()
    assert len(poller.members) == 3
    assert poller.error is None

    poller.poll_once()
    assert len(poller.members) == 3
    assert poller.error and "network error" in poller.error


def _walk(start_m: float, end_m: float, step_m: float, t0: float = 0.0, dt: float = 3.0):
    samples = []
    meters, ts = start_m, t0
    while meters <= end_m:
        samples.append(sample_at(meters, ts))
        meters += step_m
        ts += dt
    return samples


def test_run_replay_distance_time_and_alarms():
    route = ActiveRoute(
        "walking",
        [stop_at("Start", 0), stop_at("Plaza", 300), stop_at("Museum", 600)],
    )
    samples = _walk(0, 600, 10)

    result = cli.run_replay(samples, route)

    assert result.total_meters == pytest.approx(600.0)
    assert result.elapsed_seconds == int(samples[-1].timestamp - samples[0].timestamp)
    assert [alarm.stop_name for alarm in result.alarms] == ["Plaza", "Museum"]
    assert all(alarm.distance_m <= 50.0 for alarm in result.alarms)
    assert result.notifications_sent == 2


def test_run_replay_without_samples():
    result = cli.run_replay([], ActiveRoute("walking", [stop_at("Start", 0)]))
    assert result.total_meters == 0.0 and result.alarms == []


def test_replay_command_reads_csv_and_route(tmp_path, capsys):
    samples_csv = tmp_path / "track.csv"
    lines = ["latitude,longitude,timestamp"]
    for i in range(0, 31):
        lines.append(f"{north_of(BASE_LAT, i * 10)},{BASE_LON},{i * 3}")
    samples_csv.write_text("\n".join(lines) + "\n", encoding="utf-8")
    route_json = tmp_path / "route.json"
    route_json.write_text(
        json.dumps(
            {
                "mode": "walking",
                "location": [
                    {"locationName": "Start", "latitude": BASE_LAT, "longitude": BASE_LON},
                    {
                        "locationName": "Basilica",
                        "latitude": north_of(BASE_LAT, 300),
                        "longitude": BASE_LON,
                    },
                ],
            }
        ),
        encoding="utf-8",
    )

    code = cli.main(["replay", "--samples", str(samples_csv), "--route", str(route_json)])

    out = capsys.readouterr().out
    assert code == 0
    assert "Distance travelled: 0.30 km" in out
    assert "Elapsed route time: 90s" in out
    assert "Alarm: Basilica" in out


def test_replay_command_rejects_missing_columns(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text("lat,lon\n1,2\n", encoding="utf-8")
    route = tmp_path / "route.json"
    route.write_text(json.dumps({"mode": "walking", "location": []}), encoding="utf-8")
    assert cli.main(["replay", "--samples", str(bad), "--route", str(route)]) == 2


def test_members_command_polls_room(monkeypatch):
    calls = []

    def fake_get(self, room, token):
        calls.append((room, token))
        from tara_tracking.models import MemberLocation

        return [MemberLocation.from_payload(member_payload("u1", "ana"))]

    monkeypatch.setattr(RoomAPI, "get_room_members", fake_get)
    monkeypatch.setattr(cli.time, "sleep", lambda _s: None)

    code = cli.main(["members", "--tour", "t5", "--token", "tok", "--polls", "2"])

    assert code == 0
    assert calls == [(Room(RoomKind.TOUR, "t5"), "tok")] * 2


def test_members_command_requires_room():
    with pytest.raises(SystemExit):
        cli.main(["members", "--token", "tok"])
