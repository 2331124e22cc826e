from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import structlog

from ..attendance.state import derive_attendance_state
from ..casts.service import CastService
from ..common.datetime_utils import end_of_month, start_of_month
from ..core.constants import DEFAULT_TIME_ZONE, DEFAULT_UPCOMING_LIMIT, REGULAR_DESIGNATION
from ..requests.service import AttendanceRequestService
from ..reservations.projection import project_reservation
from ..reservations.repository import ReservationRepository
from ..reservations.service import ReservationService
from ..schedules.service import ScheduleService
from .performance import build_performance_snapshot
from .stats import aggregate_dashboard_stats

logger = structlog.get_logger("cast_portal.dashboard")


class DashboardService:
    """Assemble the cast portal dashboard.

    The reads are independent slices of data, so they are issued together on a
    small thread pool and joined once all have returned. The first failure is
    re-raised unchanged from `Future.result()`.
    """

    def __init__(
        self,
        casts: CastService,
        reservations: ReservationRepository,
        reservation_service: ReservationService,
        request_service: AttendanceRequestService,
        schedule_service: ScheduleService,
        *,
        time_zone: str = DEFAULT_TIME_ZONE,
        upcoming_limit: int = DEFAULT_UPCOMING_LIMIT,
        max_workers: int = 6,
    ):
        self._casts = casts
        self._reservations = reservations
        self._reservation_service = reservation_service
        self._requests = request_service
        self._schedules = schedule_service
        self._tz = time_zone
        self._upcoming_limit = int(upcoming_limit)
        self._max_workers = max(1, int(max_workers))

    def get_dashboard(self, cast_id: str, store_id: str, *, now: datetime) -> dict:
        month_start = start_of_month(now, self._tz)
        month_end = end_of_month(now, self._tz)

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            cast_f = pool.submit(self._casts.get_for_store, cast_id, store_id)
            today_f = pool.submit(self._reservation_service.today, cast_id, store_id, now=now)
            upcoming_f = pool.submit(
                self._reservation_service.upcoming, cast_id, store_id, now=now, limit=self._upcoming_limit
            )
            month_f = pool.submit(
                self._reservations.find_month_rows,
                cast_id=cast_id,
                store_id=store_id,
                start=month_start,
                end=month_end,
            )
            open_requests_f = pool.submit(self._requests.recent_open, cast_id)
            open_count_f = pool.submit(self._requests.count_open, cast_id)
            scheduled_f = pool.submit(self._schedules.is_scheduled_on, cast_id, store_id, now=now)

            cast = cast_f.result()
            today = today_f.result()
            upcoming = upcoming_f.result()
            month = month_f.result()
            open_requests = open_requests_f.result()
            open_count = open_count_f.result()
            scheduled_today = scheduled_f.result()

        stats = aggregate_dashboard_stats(today=today, upcoming=upcoming, month=month)
        stats = stats.with_pending_requests(open_count)
        attendance = derive_attendance_state(today, upcoming, now)
        upcoming_projected = [project_reservation(r, now).to_dict() for r in upcoming]

        logger.debug(
            "dashboard_assembled",
            cast_id=cast_id,
            store_id=store_id,
            today=len(today),
            upcoming=len(upcoming),
            month=len(month),
        )

        return {
            "cast": cast.to_card(),
            "nextReservation": upcoming_projected[0] if upcoming_projected else None,
            "todayReservations": [project_reservation(r, now).to_dict() for r in today],
            "stats": stats.to_dict(),
            "attendance": attendance.to_dict(),
            "attendanceRequests": open_requests,
            "isScheduledToday": scheduled_today,
        }

    def get_performance(self, cast_id: str, store_id: str, *, now: datetime) -> dict:
        """This month's designation rankings of the cast among its store's casts."""
        month_start = start_of_month(now, self._tz)
        month_end = end_of_month(now, self._tz)

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            cast_f = pool.submit(self._casts.get_for_store, cast_id, store_id)
            ids_f = pool.submit(self._casts.list_ids_for_store, store_id)
            total_f = pool.submit(
                self._reservations.count_by_cast, store_id=store_id, start=month_start, end=month_end
            )
            regular_f = pool.submit(
                self._reservations.count_by_cast,
                store_id=store_id,
                start=month_start,
                end=month_end,
                designation_type=REGULAR_DESIGNATION,
            )

            cast = cast_f.result()
            cast_ids = ids_f.result()
            total_counts = total_f.result()
            regular_counts = regular_f.result()

        snapshot = build_performance_snapshot(
            cast=cast,
            cast_ids=cast_ids,
            total_counts=total_counts,
            regular_counts=regular_counts,
            now=now,
            tz=self._tz,
        )
        return snapshot.to_dict()
