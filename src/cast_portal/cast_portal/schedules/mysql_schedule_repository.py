from __future__ import annotations

import uuid
from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, utc_or_none
from .model import CastSchedule, NewSchedule, ScheduleChange
from .repository import ScheduleRepository

_COLUMNS = "sc.schedule_id, sc.cast_id, sc.schedule_date, sc.start_time, sc.end_time, sc.is_available"


def _to_schedule(r: dict) -> CastSchedule:
    return CastSchedule(
        schedule_id=r["schedule_id"],
        cast_id=r["cast_id"],
        schedule_date=r["schedule_date"],
        start_time=utc_or_none(r["start_time"]),
        end_time=utc_or_none(r["end_time"]),
        is_available=bool(r["is_available"]),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, entry: NewSchedule) -> CastSchedule:
        schedule_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO cast_schedules(schedule_id, cast_id, schedule_date, start_time, end_time, is_available)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    schedule_id,
                    entry.cast_id,
                    entry.schedule_date,
                    entry.start_time,
                    entry.end_time,
                    int(entry.is_available),
                ),
            )
        return CastSchedule(
            schedule_id=schedule_id,
            cast_id=entry.cast_id,
            schedule_date=entry.schedule_date,
            start_time=entry.start_time,
            end_time=entry.end_time,
            is_available=entry.is_available,
        )

    def list_range(self, *, cast_id: str, store_id: str, start: date, end: date) -> Sequence[CastSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM cast_schedules sc
                JOIN casts c ON c.cast_id = sc.cast_id
                WHERE sc.cast_id=%s AND c.store_id=%s AND sc.schedule_date BETWEEN %s AND %s
                ORDER BY sc.schedule_date ASC
                """,
                (cast_id, store_id, start, end),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def find_available_on(self, *, cast_id: str, store_id: str, day: date) -> Optional[CastSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM cast_schedules sc
                JOIN casts c ON c.cast_id = sc.cast_id
                WHERE sc.cast_id=%s AND c.store_id=%s AND sc.schedule_date=%s AND sc.is_available=1
                """,
                (cast_id, store_id, day),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def apply_window(self, *, cast_id: str, changes: Sequence[ScheduleChange]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            for change in changes:
                entry = change.entry
                if entry is None:
                    cur.execute(
                        "DELETE FROM cast_schedules WHERE cast_id=%s AND schedule_date=%s",
                        (cast_id, change.schedule_date),
                    )
                    continue
                cur.execute(
                    """
                    INSERT INTO cast_schedules(schedule_id, cast_id, schedule_date, start_time, end_time, is_available)
                    VALUES(%s,%s,%s,%s,%s,1)
                    ON DUPLICATE KEY UPDATE
                        start_time=VALUES(start_time), end_time=VALUES(end_time), is_available=1
                    """,
                    (str(uuid.uuid4()), cast_id, entry.schedule_date, entry.start_time, entry.end_time),
                )
