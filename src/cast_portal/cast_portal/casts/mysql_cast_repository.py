from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Cast
from .repository import CastRepository


class MySQLCastRepository(CastRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_store(self, *, cast_id: str, store_id: str) -> Optional[Cast]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.cast_id, c.store_id, c.name, c.image, c.work_status,
                       c.request_attendance_enabled, s.store_name
                FROM casts c
                JOIN stores s ON s.store_id = c.store_id
                WHERE c.cast_id=%s AND c.store_id=%s
                """,
                (cast_id, store_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Cast(
                cast_id=r["cast_id"],
                store_id=r["store_id"],
                name=r["name"],
                work_status=r["work_status"],
                image=r.get("image"),
                store_name=r.get("store_name"),
                request_attendance_enabled=bool(r.get("request_attendance_enabled")),
            )

    def get_store_id(self, *, cast_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT store_id FROM casts WHERE cast_id=%s", (cast_id,))
            r = fetchone(cur)
            return r["store_id"] if r else None

    def list_ids_for_store(self, *, store_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT cast_id FROM casts WHERE store_id=%s ORDER BY cast_id", (store_id,))
            return [r["cast_id"] for r in fetchall(cur)]
