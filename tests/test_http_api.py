from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cast_portal.attendance.service import AttendanceService
from cast_portal.casts.model import Cast
from cast_portal.casts.service import CastService
from cast_portal.container import Container
from cast_portal.dashboard.service import DashboardService
from cast_portal.database.connection import DatabaseConnection, DBConfig
from cast_portal.requests.service import AttendanceRequestService
from cast_portal.reservations.service import ReservationService
from cast_portal.schedules.service import ScheduleService
from cast_portal.settlements.service import SettlementService

from tests.fakes import (
    InMemoryCasts,
    InMemoryReservations,
    InMemoryRequests,
    InMemorySchedules,
    make_reservation,
)


@pytest.fixture()
def container():
    now = datetime.now(timezone.utc)
    casts = CastService(InMemoryCasts([Cast(cast_id="c1", store_id="s1", name="あかり", work_status="active")]))
    reservations = InMemoryReservations(
        [
            make_reservation("soon", now + timedelta(minutes=10)),
            make_reservation("old", now - timedelta(days=1, hours=2)),
        ]
    )
    reservation_service = ReservationService(reservations)
    request_service = AttendanceRequestService(InMemoryRequests(now), reservation_service)
    schedule_service = ScheduleService(InMemorySchedules(), reservations, casts)

    return Container(
        conn=DatabaseConnection(DBConfig.from_mapping({"database": "unused"})),
        cast_service=casts,
        reservation_service=reservation_service,
        attendance_service=AttendanceService(reservations, reservation_service),
        request_service=request_service,
        schedule_service=schedule_service,
        dashboard_service=DashboardService(
            casts, reservations, reservation_service, request_service, schedule_service, max_workers=2
        ),
        settlement_service=SettlementService(reservations),
    )


@pytest.fixture()
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr("cast_portal.main.setup_logging", lambda **kw: None)

    from cast_portal.main import create_app

    return create_app(container).test_client()


def test_dashboard_resolves_store_from_cast(client):
    res = client.get("/api/casts/c1/dashboard")
    assert res.status_code == 200

    body = res.get_json()
    assert body["cast"]["id"] == "c1"
    assert body["nextReservation"]["id"] == "soon"
    assert body["attendance"]["currentReservationId"] == "soon"


def test_unknown_cast_is_404(client):
    res = client.get("/api/casts/nobody/dashboard")
    assert res.status_code == 404
    assert res.get_json()["error"]


def test_wrong_store_is_404(client):
    assert client.get("/api/casts/c1/dashboard?storeId=s2").status_code == 404


@pytest.mark.parametrize("query", ["limit=0", "limit=101", "limit=abc", "scope=tomorrow"])
def test_bad_list_parameters_are_400(client, query):
    assert client.get(f"/api/casts/c1/reservations?{query}").status_code == 400


def test_reservation_list_scopes(client):
    past = client.get("/api/casts/c1/reservations?scope=past").get_json()
    assert [i["id"] for i in past["items"]] == ["old"]
    assert past["meta"]["scope"] == "past"

    upcoming = client.get("/api/casts/c1/reservations").get_json()
    assert [i["id"] for i in upcoming["items"]] == ["soon"]


def test_reservation_detail(client):
    assert client.get("/api/casts/c1/reservations/soon").get_json()["id"] == "soon"
    assert client.get("/api/casts/c1/reservations/missing").status_code == 404


def test_check_in_twice(client):
    url = "/api/casts/c1/reservations/soon/attendance"
    first = client.post(url, json={"action": "check-in"})
    assert first.status_code == 200
    assert first.get_json()["checkedInAt"]

    second = client.post(url, json={"action": "check-in"})
    assert second.status_code == 400


def test_attendance_rejects_bad_payloads(client):
    url = "/api/casts/c1/reservations/soon/attendance"
    assert client.post(url, data="not json", content_type="application/json").status_code == 400
    assert client.post(url, json={"action": "dance"}).status_code == 400
    assert client.post(url, json={"action": "check-in", "timestamp": "later"}).status_code == 400


def test_attendance_request_created(client):
    res = client.post(
        "/api/casts/c1/reservations/old/attendance-requests",
        json={"type": "check-out", "requestedTime": "2026-03-15T10:00:00+09:00", "reason": "押し忘れ"},
    )
    assert res.status_code == 201
    assert res.get_json()["requests"][0]["requestedTime"] == "2026-03-15T01:00:00.000Z"


def test_duplicate_schedule_is_409(client):
    payload = {"castId": "c1", "date": "2030-01-10", "startTime": "10:00", "endTime": "18:00"}
    assert client.post("/api/cast-schedules", json=payload).status_code == 201

    res = client.post("/api/cast-schedules", json=payload)
    assert res.status_code == 409
    assert res.get_json()["detail"]["date"] == "2030-01-10"


def test_schedule_window_defaults_to_a_week(client):
    body = client.get("/api/casts/c1/schedule").get_json()
    assert len(body["items"]) == 7
    assert all("near_term" in i["lockReasons"] for i in body["items"])


def test_schedule_update_rejects_near_term_day(client):
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    res = client.post("/api/casts/c1/schedule", json={"updates": [{"date": today, "status": "off"}]})
    assert res.status_code == 400


def test_settlements(client):
    body = client.get("/api/casts/c1/settlements").get_json()
    assert set(body) == {"summary", "recent", "days"}


def test_unexpected_errors_are_500(client, container):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    container.settlement_service.get_settlements = boom
    res = client.get("/api/casts/c1/settlements")
    assert res.status_code == 500
    assert res.get_json() == {"error": "Internal server error"}


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert "error" in res.get_json()


def test_schedule_for_unknown_cast_is_404(client):
    payload = {"castId": "ghost", "date": "2030-01-10", "startTime": "10:00", "endTime": "18:00"}
    res = client.post("/api/cast-schedules", json=payload)
    assert res.status_code == 404


@pytest.mark.parametrize("days", [7.9, True, "7.9", [7]])
def test_schedule_update_rejects_non_integer_days(client, days):
    res = client.post("/api/casts/c1/schedule", json={"updates": [], "days": days})
    assert res.status_code == 400


def test_schedule_days_accepts_integer_and_numeric_string(client):
    assert len(client.post("/api/casts/c1/schedule", json={"updates": [], "days": 3}).get_json()["items"]) == 3
    assert len(client.get("/api/casts/c1/schedule?days=2").get_json()["items"]) == 2


def test_performance_snapshot(client):
    body = client.get("/api/casts/c1/performance").get_json()
    assert body["cast"]["id"] == "c1"
    assert body["totalCastCount"] == 1
    assert body["totalDesignation"]["rank"] == 1
    assert client.get("/api/casts/nobody/performance").status_code == 404
