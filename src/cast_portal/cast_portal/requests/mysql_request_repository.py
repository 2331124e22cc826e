from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceRequestStatus, AttendanceRequestType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, utc_or_none
from .model import AttendanceRequest
from .repository import AttendanceRequestRepository


class MySQLAttendanceRequestRepository(AttendanceRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        reservation_id: str,
        cast_id: str,
        type: AttendanceRequestType,
        requested_time: datetime,
        reason: Optional[str],
    ) -> str:
        request_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reservation_attendance_requests(
                    request_id, reservation_id, cast_id, type, status, requested_time, reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request_id,
                    reservation_id,
                    cast_id,
                    type.value,
                    AttendanceRequestStatus.PENDING.value,
                    requested_time,
                    reason,
                ),
            )
        return request_id

    def list_recent(
        self,
        *,
        cast_id: str,
        limit: int,
        statuses: Optional[Sequence[AttendanceRequestStatus]] = None,
    ) -> Sequence[AttendanceRequest]:
        clauses = ["cast_id=%s"]
        params: list[object] = [cast_id]
        if statuses:
            clauses.append(f"status IN ({in_clause(statuses)})")
            params.extend(s.value for s in statuses)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT request_id, reservation_id, cast_id, type, status,
                       requested_time, reason, created_at
                FROM reservation_attendance_requests
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [
                AttendanceRequest(
                    request_id=r["request_id"],
                    reservation_id=r["reservation_id"],
                    cast_id=r["cast_id"],
                    type=AttendanceRequestType(r["type"]),
                    status=AttendanceRequestStatus(r["status"]),
                    requested_time=utc_or_none(r["requested_time"]),
                    created_at=utc_or_none(r["created_at"]),
                    reason=r.get("reason"),
                )
                for r in fetchall(cur)
            ]

    def count_by_status(self, *, cast_id: str, statuses: Sequence[AttendanceRequestStatus]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS n
                FROM reservation_attendance_requests
                WHERE cast_id=%s AND status IN ({in_clause(statuses)})
                """,
                tuple([cast_id] + [s.value for s in statuses]),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
