from __future__ import annotations

from datetime import timedelta

import pytest

from cast_portal.casts.model import Cast
from cast_portal.casts.service import CastService
from cast_portal.core.enums import AttendanceRequestStatus, AttendanceRequestType, ReservationStatus
from cast_portal.core.exceptions import NotFoundError
from cast_portal.dashboard.service import DashboardService
from cast_portal.requests.model import AttendanceRequest
from cast_portal.requests.service import AttendanceRequestService
from cast_portal.reservations.service import ReservationService
from cast_portal.schedules.model import NewSchedule
from cast_portal.schedules.service import ScheduleService

from tests.fakes import (
    InMemoryCasts,
    InMemoryReservations,
    InMemoryRequests,
    InMemorySchedules,
    make_reservation,
    utc,
)

# 14:00 in Tokyo
NOW = utc(2026, 3, 15, 5, 0)


def _request(request_id, status, minutes_ago):
    return AttendanceRequest(
        request_id=request_id,
        reservation_id="done",
        cast_id="c1",
        type=AttendanceRequestType.CHECK_OUT,
        status=status,
        requested_time=NOW - timedelta(hours=3),
        created_at=NOW - timedelta(minutes=minutes_ago),
    )


def _build(max_workers=4):
    casts = InMemoryCasts([Cast(cast_id="c1", store_id="s1", name="あかり", work_status="active", store_name="本店")])
    reservations = InMemoryReservations(
        [
            make_reservation(
                "done",
                NOW - timedelta(hours=4),
                status=ReservationStatus.COMPLETED,
                staff_revenue=6000,
                welfare_expense=500,
                checked_in_at=NOW - timedelta(hours=4),
                checked_out_at=NOW - timedelta(hours=3),
            ),
            make_reservation("soon", NOW + timedelta(minutes=20), staff_revenue=7000),
            make_reservation("tomorrow", NOW + timedelta(days=1)),
            make_reservation("last-month", utc(2026, 2, 20, 5, 0), staff_revenue=99999),
        ]
    )
    requests = InMemoryRequests(NOW)
    requests.add(_request("q1", AttendanceRequestStatus.PENDING, 30))
    requests.add(_request("q2", AttendanceRequestStatus.IN_REVIEW, 20))
    requests.add(_request("q3", AttendanceRequestStatus.APPROVED, 10))

    schedules = InMemorySchedules()
    schedules.create(
        NewSchedule(
            cast_id="c1",
            schedule_date=utc(2026, 3, 15).date(),
            start_time=utc(2026, 3, 15, 1, 0),
            end_time=utc(2026, 3, 15, 9, 0),
        )
    )

    reservation_service = ReservationService(reservations)
    svc = DashboardService(
        CastService(casts),
        reservations,
        reservation_service,
        AttendanceRequestService(requests, reservation_service),
        ScheduleService(schedules, reservations, CastService(casts)),
        max_workers=max_workers,
    )
    return svc


def test_dashboard_payload():
    data = _build().get_dashboard("c1", "s1", now=NOW)

    assert data["cast"]["name"] == "あかり"
    assert data["nextReservation"]["id"] == "soon"
    assert [r["id"] for r in data["todayReservations"]] == ["done", "soon"]
    assert data["isScheduledToday"] is True

    stats = data["stats"]
    assert stats["todayCount"] == 2
    assert stats["completedToday"] == 1
    assert stats["upcomingCount"] == 2
    assert stats["todayRevenue"] == 13000
    assert stats["monthRevenue"] == 13000
    assert stats["welfareThisMonth"] == 500
    assert stats["pendingCount"] == 2
    assert stats["pendingRequests"] == 2

    assert [r["id"] for r in data["attendanceRequests"]] == ["q2", "q1"]

    attendance = data["attendance"]
    assert attendance["currentReservationId"] == "soon"
    assert attendance["canCheckIn"] is True
    assert attendance["lastCheckOutAt"] == "2026-03-15T02:00:00.000Z"


def test_single_worker_gives_same_result():
    assert _build(max_workers=1).get_dashboard("c1", "s1", now=NOW) == _build().get_dashboard("c1", "s1", now=NOW)


def test_unknown_cast_propagates_not_found():
    with pytest.raises(NotFoundError):
        _build().get_dashboard("c1", "other-store", now=NOW)


def test_store_failure_propagates_unchanged():
    svc = _build()

    def boom(**kw):
        raise ConnectionError("db down")

    svc._reservations.find_month_rows = boom
    with pytest.raises(ConnectionError):
        svc.get_dashboard("c1", "s1", now=NOW)


def _service_for(reservations):
    casts = InMemoryCasts([Cast(cast_id="c1", store_id="s1", name="あかり", work_status="active")])
    reservation_service = ReservationService(reservations)
    return DashboardService(
        CastService(casts),
        reservations,
        reservation_service,
        AttendanceRequestService(InMemoryRequests(NOW), reservation_service),
        ScheduleService(InMemorySchedules(), reservations, CastService(casts)),
        max_workers=2,
    )


def test_month_revenue_follows_tokyo_month_edges():
    reservations = InMemoryReservations(
        [
            # 2026-03-01 00:00 JST
            make_reservation("first-instant", utc(2026, 2, 28, 15, 0), staff_revenue=1),
            # 2026-03-31 23:59:59.999999 JST
            make_reservation("last-instant", utc(2026, 3, 31, 14, 59, 59, 999999), staff_revenue=10),
            # 2026-04-01 00:00 JST
            make_reservation("next-month", utc(2026, 3, 31, 15, 0), staff_revenue=100),
            # 2026-02-28 23:59:59.999999 JST
            make_reservation("prev-month", utc(2026, 2, 28, 14, 59, 59, 999999), staff_revenue=1000),
        ]
    )
    stats = _service_for(reservations).get_dashboard("c1", "s1", now=NOW)["stats"]

    assert stats["monthRevenue"] == 11
