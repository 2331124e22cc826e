from __future__ import annotations

from datetime import timedelta

from cast_portal.core.enums import ReservationStatus, SortOrder
from cast_portal.reservations.model import ReservationOption
from cast_portal.settlements.service import SettlementService, aggregate_settlement

from tests.fakes import InMemoryReservations, make_reservation, utc

NOW = utc(2026, 3, 20, 3, 0)


def _settled(reservation_id, start, **kw):
    return make_reservation(
        reservation_id,
        start,
        status=ReservationStatus.COMPLETED,
        checked_in_at=start,
        checked_out_at=start + timedelta(hours=1),
        **kw,
    )


def test_summary_partitions_completed_and_pending():
    rows = [
        _settled("a", utc(2026, 3, 1, 3, 0), price=10000, staff_revenue=6000, store_revenue=4000, welfare_expense=300),
        # checked out but not marked completed yet
        make_reservation("b", utc(2026, 3, 2, 3, 0), price=8000, checked_out_at=utc(2026, 3, 2, 4, 0)),
        make_reservation("c", utc(2026, 3, 3, 3, 0), price=5000, staff_revenue=None),
    ]
    summary = aggregate_settlement(rows, month="2026-03").summary

    assert summary.total_revenue == 23000
    assert summary.staff_revenue == 6000
    assert summary.store_revenue == 4000
    assert summary.welfare_expense == 300
    assert summary.completed_count == 1
    assert summary.pending_count == 2
    assert summary.completed_count + summary.pending_count == len(rows)


def test_recent_is_newest_first_and_capped():
    rows = [make_reservation(f"r{i:02d}", utc(2026, 3, 1, 0, 0) + timedelta(hours=i)) for i in range(30)]
    report = aggregate_settlement(rows, month="2026-03")

    assert len(report.recent) == 25
    assert report.recent[0].id == "r29"
    assert report.recent[-1].id == "r05"
    assert report.summary.pending_count == 30


def test_days_group_by_local_date():
    rows = [
        # 23:30 JST on 3/1 and 00:30 JST on 3/2
        make_reservation("late", utc(2026, 3, 1, 14, 30), price=1000),
        make_reservation("early", utc(2026, 3, 1, 15, 30), price=2000),
        make_reservation("noon", utc(2026, 3, 2, 3, 0), price=3000),
    ]
    days = aggregate_settlement(rows, month="2026-03").to_dict()["days"]

    assert [d["date"] for d in days] == ["2026-03-02", "2026-03-01"]
    assert days[0]["totalRevenue"] == 5000
    assert days[0]["reservationCount"] == 2
    assert [r["id"] for r in days[0]["records"]] == ["early", "noon"]


def test_line_item_options_carry_shares():
    r = make_reservation(
        "r1",
        utc(2026, 3, 5, 3, 0),
        options=(ReservationOption(option_id="o1", option_name="アロマ", option_price=2000, store_share=800, cast_share=1200),),
    )
    item = aggregate_settlement([r], month="2026-03").recent[0].to_dict()

    assert item["options"] == [{"id": "o1", "name": "アロマ", "price": 2000, "storeShare": 800, "castShare": 1200}]
    assert item["startTime"] == "2026-03-05T03:00:00.000Z"


def test_empty_month():
    data = aggregate_settlement([], month="2026-03").to_dict()
    assert data["summary"]["totalRevenue"] == 0
    assert data["recent"] == []
    assert data["days"] == []


def test_service_reads_the_local_month():
    repo = InMemoryReservations(
        [
            make_reservation("in", utc(2026, 2, 28, 15, 0)),
            make_reservation("out", utc(2026, 2, 28, 14, 59)),
        ]
    )
    data = SettlementService(repo).get_settlements("c1", "s1", now=NOW)

    assert data["summary"]["month"] == "2026-03"
    assert [i["id"] for i in data["recent"]] == ["in"]
    assert repo.queries[-1].order == SortOrder.DESC
