from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import date_key, end_of_month, month_label, start_of_month, to_iso
from ..core.constants import DEFAULT_TIME_ZONE, SETTLEMENT_RECENT_LIMIT
from ..core.enums import SortOrder
from ..reservations.model import Reservation
from ..reservations.query import ReservationQuery
from ..reservations.repository import ReservationRepository

logger = structlog.get_logger("cast_portal.settlements")


@dataclass(frozen=True)
class SettlementSummary:
    month: str
    total_revenue: int
    staff_revenue: int
    store_revenue: int
    welfare_expense: int
    completed_count: int
    pending_count: int

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "totalRevenue": self.total_revenue,
            "staffRevenue": self.staff_revenue,
            "storeRevenue": self.store_revenue,
            "welfareExpense": self.welfare_expense,
            "completedCount": self.completed_count,
            "pendingCount": self.pending_count,
        }


@dataclass(frozen=True)
class SettlementLineItem:
    id: str
    start_time: datetime
    status: str
    course_name: Optional[str]
    price: int
    staff_revenue: int
    store_revenue: int
    welfare_expense: int
    options: tuple[dict, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startTime": to_iso(self.start_time),
            "status": self.status,
            "courseName": self.course_name,
            "price": self.price,
            "staffRevenue": self.staff_revenue,
            "storeRevenue": self.store_revenue,
            "welfareExpense": self.welfare_expense,
            "options": list(self.options),
        }


@dataclass(frozen=True)
class SettlementReport:
    summary: SettlementSummary
    recent: list[SettlementLineItem]
    days: list[dict]

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "recent": [i.to_dict() for i in self.recent],
            "days": self.days,
        }


def _line_item(r: Reservation) -> SettlementLineItem:
    options = []
    for o in r.options:
        entry = {"id": o.option_id, "name": o.option_name, "price": o.option_price or 0}
        if o.store_share is not None:
            entry["storeShare"] = o.store_share
        if o.cast_share is not None:
            entry["castShare"] = o.cast_share
        options.append(entry)

    return SettlementLineItem(
        id=r.reservation_id,
        start_time=r.start_time,
        status=r.status.value,
        course_name=r.course.name if r.course else None,
        price=r.price or 0,
        staff_revenue=r.staff_revenue or 0,
        store_revenue=r.store_revenue or 0,
        welfare_expense=r.welfare_expense or 0,
        options=tuple(options),
    )


def aggregate_settlement(
    reservations: Sequence[Reservation],
    *,
    month: str,
    time_zone: str = DEFAULT_TIME_ZONE,
    recent_limit: int = SETTLEMENT_RECENT_LIMIT,
) -> SettlementReport:
    """Fold one month of reservations.

    Every reservation is either completed (checked out and status completed)
    or pending, so completed_count + pending_count == len(reservations).
    """
    total = staff = store = welfare = 0
    completed = pending = 0
    for r in reservations:
        total += r.price or 0
        staff += r.staff_revenue or 0
        store += r.store_revenue or 0
        welfare += r.welfare_expense or 0
        if r.is_settled:
            completed += 1
        else:
            pending += 1

    newest_first = sorted(reservations, key=lambda r: r.start_time, reverse=True)
    items = [_line_item(r) for r in newest_first]

    by_day: dict[str, dict] = {}
    for item in items:
        key = date_key(item.start_time, time_zone)
        day = by_day.setdefault(key, {"date": key, "totalRevenue": 0, "reservationCount": 0, "records": []})
        day["records"].append(item)
        day["totalRevenue"] += item.price
        day["reservationCount"] += 1

    days = []
    for key in sorted(by_day, reverse=True):
        day = by_day[key]
        records = sorted(day["records"], key=lambda i: i.start_time)
        days.append({**day, "records": [i.to_dict() for i in records]})

    summary = SettlementSummary(
        month=month,
        total_revenue=total,
        staff_revenue=staff,
        store_revenue=store,
        welfare_expense=welfare,
        completed_count=completed,
        pending_count=pending,
    )
    return SettlementReport(summary=summary, recent=items[:recent_limit], days=days)


class SettlementService:
    def __init__(self, reservations: ReservationRepository, *, time_zone: str = DEFAULT_TIME_ZONE):
        self._reservations = reservations
        self._tz = time_zone

    def get_settlements(self, cast_id: str, store_id: str, *, now: datetime) -> dict:
        rows = self._reservations.find_for_cast(
            ReservationQuery.between(
                cast_id,
                store_id,
                start_of_month(now, self._tz),
                end_of_month(now, self._tz),
                order=SortOrder.DESC,
            )
        )
        report = aggregate_settlement(rows, month=month_label(now, self._tz), time_zone=self._tz)
        logger.debug("settlement_built", cast_id=cast_id, reservations=len(rows))
        return report.to_dict()
