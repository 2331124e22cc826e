from __future__ import annotations

import pytest

from cast_portal.casts.model import Cast
from cast_portal.casts.service import CastService
from cast_portal.core.enums import ReservationStatus
from cast_portal.core.exceptions import NotFoundError
from cast_portal.dashboard.performance import compute_rank, period_label
from cast_portal.dashboard.service import DashboardService
from cast_portal.requests.service import AttendanceRequestService
from cast_portal.reservations.service import ReservationService
from cast_portal.schedules.service import ScheduleService

from tests.fakes import (
    InMemoryCasts,
    InMemoryReservations,
    InMemoryRequests,
    InMemorySchedules,
    make_reservation,
    utc,
)

# 2026-03-15 14:00 in Tokyo
NOW = utc(2026, 3, 15, 5, 0)


def test_rank_counts_missing_casts_as_zero():
    assert compute_rank(["a", "b", "c"], {"b": 3, "c": 1}, "a") == (3, 0)
    assert compute_rank(["a", "b", "c"], {"b": 3, "c": 1}, "b") == (1, 3)


def test_tied_casts_share_a_rank_regardless_of_order():
    counts = {"a": 2, "b": 5, "c": 2}
    assert compute_rank(["a", "b", "c"], counts, "c") == (2, 2)
    assert compute_rank(["c", "b", "a"], counts, "c") == (2, 2)
    assert compute_rank(["c", "b", "a"], counts, "a") == (2, 2)


def test_everyone_at_zero_is_first():
    assert compute_rank(["a", "b"], {}, "b") == (1, 0)


def test_cast_outside_the_list_has_no_rank():
    assert compute_rank(["a"], {"z": 4}, "z") == (None, 4)


def test_period_label_uses_tokyo_month():
    # 2026-03-31 15:00 UTC is already April in Tokyo
    assert period_label(utc(2026, 3, 31, 15, 0), "Asia/Tokyo") == "2026年4月"
    assert period_label(NOW, "Asia/Tokyo") == "2026年3月"


def _service(reservations):
    casts = InMemoryCasts(
        [
            Cast(cast_id="c1", store_id="s1", name="あかり", work_status="active", store_name="本店"),
            Cast(cast_id="c2", store_id="s1", name="みお", work_status="active", store_name="本店"),
            Cast(cast_id="c3", store_id="s1", name="ゆい", work_status="active", store_name="本店"),
            Cast(cast_id="x1", store_id="s2", name="他店", work_status="active"),
        ]
    )
    reservations = InMemoryReservations(reservations)
    reservation_service = ReservationService(reservations)
    return DashboardService(
        CastService(casts),
        reservations,
        reservation_service,
        AttendanceRequestService(InMemoryRequests(NOW), reservation_service),
        ScheduleService(InMemorySchedules(), reservations, CastService(casts)),
        max_workers=2,
    )


def test_snapshot_ranks_within_store_and_month():
    svc = _service(
        [
            make_reservation("a1", utc(2026, 3, 2, 3, 0), designation_type="regular"),
            make_reservation("a2", utc(2026, 3, 3, 3, 0), designation_type="free"),
            make_reservation("b1", utc(2026, 3, 4, 3, 0), cast_id="c2", designation_type="regular"),
            make_reservation("b2", utc(2026, 3, 5, 3, 0), cast_id="c2", designation_type="regular"),
            make_reservation("b3", utc(2026, 3, 6, 3, 0), cast_id="c2", designation_type="regular"),
            make_reservation(
                "cancelled",
                utc(2026, 3, 7, 3, 0),
                status=ReservationStatus.CANCELLED,
                designation_type="regular",
            ),
            make_reservation("feb", utc(2026, 2, 20, 3, 0), designation_type="regular"),
            make_reservation("other-store", utc(2026, 3, 8, 3, 0), cast_id="x1", store_id="s2"),
        ]
    )

    data = svc.get_performance("c1", "s1", now=NOW)

    assert data["cast"] == {"id": "c1", "name": "あかり", "storeId": "s1", "storeName": "本店"}
    assert data["periodLabel"] == "2026年3月"
    assert data["totalCastCount"] == 3
    assert data["totalDesignation"] == {"label": "総指名ランキング（フリー含む）", "rank": 2, "count": 2}
    assert data["regularDesignation"] == {"label": "本指名ランキング", "rank": 2, "count": 1}
    assert data["access"] == {"label": "アクセス数ランキング", "rank": None, "count": None}


def test_cast_without_bookings_ranks_with_the_other_zeros():
    svc = _service([make_reservation("b1", utc(2026, 3, 4, 3, 0), cast_id="c2")])

    data = svc.get_performance("c3", "s1", now=NOW)

    assert data["totalDesignation"]["rank"] == 2
    assert data["totalDesignation"]["count"] == 0
    assert data["regularDesignation"]["rank"] == 1
    assert data["regularDesignation"]["count"] == 0


def test_snapshot_for_cast_of_another_store_is_not_found():
    with pytest.raises(NotFoundError):
        _service([]).get_performance("x1", "s1", now=NOW)
