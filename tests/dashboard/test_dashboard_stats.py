from __future__ import annotations

from datetime import timedelta

from cast_portal.core.enums import ReservationStatus
from cast_portal.dashboard.stats import aggregate_dashboard_stats
from cast_portal.reservations.model import MonthReservationRow

from tests.fakes import make_reservation, utc

T = utc(2026, 3, 15, 1, 0)


def _row(staff, welfare, status=ReservationStatus.COMPLETED, checked_out=True):
    return MonthReservationRow(
        price=10000,
        staff_revenue=staff,
        store_revenue=None,
        welfare_expense=welfare,
        status=status,
        checked_out_at=T if checked_out else None,
    )


def test_counts_and_revenue_over_today():
    today = [
        make_reservation("a", T, staff_revenue=6000, checked_out_at=T + timedelta(hours=1)),
        make_reservation("b", T + timedelta(hours=2), staff_revenue=None),
        make_reservation("c", T + timedelta(hours=4), staff_revenue=4000),
    ]
    upcoming = today[1:]

    stats = aggregate_dashboard_stats(today=today, upcoming=upcoming, month=[])

    assert stats.today_count == 3
    assert stats.completed_today == 1
    assert stats.upcoming_count == 2
    assert stats.today_revenue == 10000


def test_month_folds_treat_null_as_zero():
    month = [_row(5000, 300), _row(None, None), _row(2000, 100)]
    stats = aggregate_dashboard_stats(today=[], upcoming=[], month=month)

    assert stats.month_revenue == 7000
    assert stats.welfare_this_month == 400


def test_pending_means_not_checked_out_or_not_completed():
    month = [
        _row(1, 0),
        _row(1, 0, checked_out=False),
        _row(1, 0, status=ReservationStatus.CONFIRMED),
        _row(1, 0, status=ReservationStatus.IN_PROGRESS, checked_out=False),
    ]
    stats = aggregate_dashboard_stats(today=[], upcoming=[], month=month)
    assert stats.pending_count == 3


def test_empty_input_gives_zeroes():
    data = aggregate_dashboard_stats(today=[], upcoming=[], month=[]).with_pending_requests(2).to_dict()
    assert data == {
        "todayCount": 0,
        "completedToday": 0,
        "upcomingCount": 0,
        "todayRevenue": 0,
        "monthRevenue": 0,
        "welfareThisMonth": 0,
        "pendingCount": 0,
        "pendingRequests": 2,
    }
