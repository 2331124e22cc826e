from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from ..reservations.model import MonthReservationRow, Reservation


@dataclass(frozen=True)
class DashboardStats:
    today_count: int
    completed_today: int
    upcoming_count: int
    today_revenue: int
    month_revenue: int
    welfare_this_month: int
    pending_count: int
    # Filled in by the caller from the attendance-request count.
    pending_requests: int = 0

    def with_pending_requests(self, count: int) -> "DashboardStats":
        return replace(self, pending_requests=int(count))

    def to_dict(self) -> dict:
        return {
            "todayCount": self.today_count,
            "completedToday": self.completed_today,
            "upcomingCount": self.upcoming_count,
            "todayRevenue": self.today_revenue,
            "monthRevenue": self.month_revenue,
            "welfareThisMonth": self.welfare_this_month,
            "pendingCount": self.pending_count,
            "pendingRequests": self.pending_requests,
        }


def aggregate_dashboard_stats(
    *,
    today: Sequence[Reservation],
    upcoming: Sequence[Reservation],
    month: Sequence[MonthReservationRow],
) -> DashboardStats:
    month_revenue = 0
    welfare = 0
    pending = 0
    for row in month:
        month_revenue += row.staff_revenue or 0
        welfare += row.welfare_expense or 0
        if not row.is_settled:
            pending += 1

    return DashboardStats(
        today_count=len(today),
        completed_today=sum(1 for r in today if r.checked_out_at is not None),
        upcoming_count=len(upcoming),
        today_revenue=sum(r.staff_revenue or 0 for r in today),
        month_revenue=month_revenue,
        welfare_this_month=welfare,
        pending_count=pending,
    )
