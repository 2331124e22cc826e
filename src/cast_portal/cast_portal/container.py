from __future__ import annotations

from dataclasses import dataclass

from .attendance.service import AttendanceService
from .casts.mysql_cast_repository import MySQLCastRepository
from .casts.service import CastService
from .core.constants import DEFAULT_TIME_ZONE, DEFAULT_UPCOMING_LIMIT
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .requests.mysql_request_repository import MySQLAttendanceRequestRepository
from .requests.service import AttendanceRequestService
from .reservations.mysql_reservation_repository import MySQLReservationRepository
from .reservations.service import ReservationService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .settlements.service import SettlementService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    cast_service: CastService
    reservation_service: ReservationService
    attendance_service: AttendanceService
    request_service: AttendanceRequestService
    schedule_service: ScheduleService
    dashboard_service: DashboardService
    settlement_service: SettlementService


def build_container(
    *,
    db_config: dict,
    time_zone: str = DEFAULT_TIME_ZONE,
    upcoming_limit: int = DEFAULT_UPCOMING_LIMIT,
    query_workers: int = 6,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    casts_repo = MySQLCastRepository(conn)
    reservations_repo = MySQLReservationRepository(conn)
    requests_repo = MySQLAttendanceRequestRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)

    cast_service = CastService(casts_repo)
    reservation_service = ReservationService(reservations_repo, time_zone=time_zone)
    attendance_service = AttendanceService(reservations_repo, reservation_service)
    request_service = AttendanceRequestService(requests_repo, reservation_service)
    schedule_service = ScheduleService(schedules_repo, reservations_repo, cast_service, time_zone=time_zone)
    dashboard_service = DashboardService(
        cast_service,
        reservations_repo,
        reservation_service,
        request_service,
        schedule_service,
        time_zone=time_zone,
        upcoming_limit=upcoming_limit,
        max_workers=query_workers,
    )
    settlement_service = SettlementService(reservations_repo, time_zone=time_zone)

    return Container(
        conn=conn,
        cast_service=cast_service,
        reservation_service=reservation_service,
        attendance_service=attendance_service,
        request_service=request_service,
        schedule_service=schedule_service,
        dashboard_service=dashboard_service,
        settlement_service=settlement_service,
    )
