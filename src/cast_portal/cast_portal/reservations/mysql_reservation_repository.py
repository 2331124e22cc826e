from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import ReservationStatus, SortOrder
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, int_or_none, utc_or_none
from .model import AreaRef, CourseRef, MonthReservationRow, OptionRef, Reservation, ReservationOption
from .query import ReservationQuery
from .repository import ReservationRepository

_RESERVATION_COLUMNS = """
    r.reservation_id, r.store_id, r.cast_id, r.customer_id, r.start_time, r.end_time,
    r.status, r.price, r.staff_revenue, r.store_revenue, r.welfare_expense,
    r.designation_type, r.designation_fee, r.transportation_fee, r.additional_fee,
    r.discount_amount, r.location_memo, r.notes, r.payment_method, r.marketing_channel,
    r.cast_checked_in_at, r.cast_checked_out_at,
    cu.name AS customer_name,
    co.name AS course_name, co.duration AS course_duration, co.price AS course_price,
    a.name AS area_name, a.description AS area_description
"""

_RESERVATION_JOINS = """
    FROM reservations r
    LEFT JOIN customers cu ON cu.customer_id = r.customer_id
    LEFT JOIN courses co ON co.course_id = r.course_id
    LEFT JOIN areas a ON a.area_id = r.area_id
"""


class MySQLReservationRepository(ReservationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_for_cast(self, query: ReservationQuery) -> Sequence[Reservation]:
        clauses = ["r.cast_id=%s", "r.store_id=%s"]
        params: list[object] = [query.cast_id, query.store_id]

        time_sql, time_params = query.time_clause()
        if time_sql:
            clauses.append(time_sql)
            params.extend(time_params)

        where = " AND ".join(clauses)
        direction = "DESC" if query.order == SortOrder.DESC else "ASC"
        limit_sql = ""
        if query.limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(query.limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RESERVATION_COLUMNS}
                {_RESERVATION_JOINS}
                WHERE {where}
                ORDER BY r.start_time {direction}
                {limit_sql}
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            options = self._load_options(cur, [r["reservation_id"] for r in rows])
            return [self._to_reservation(r, options.get(r["reservation_id"], ())) for r in rows]

    def find_month_rows(
        self, *, cast_id: str, store_id: str, start: datetime, end: datetime
    ) -> Sequence[MonthReservationRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT price, staff_revenue, store_revenue, welfare_expense, status, cast_checked_out_at
                FROM reservations
                WHERE cast_id=%s AND store_id=%s AND start_time BETWEEN %s AND %s
                """,
                (cast_id, store_id, start, end),
            )
            return [
                MonthReservationRow(
                    price=int(r.get("price") or 0),
                    staff_revenue=int_or_none(r.get("staff_revenue")),
                    store_revenue=int_or_none(r.get("store_revenue")),
                    welfare_expense=int_or_none(r.get("welfare_expense")),
                    status=ReservationStatus(r["status"]),
                    checked_out_at=utc_or_none(r.get("cast_checked_out_at")),
                )
                for r in fetchall(cur)
            ]

    def get_for_cast(self, *, reservation_id: str, cast_id: str, store_id: str) -> Optional[Reservation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RESERVATION_COLUMNS}
                {_RESERVATION_JOINS}
                WHERE r.reservation_id=%s AND r.cast_id=%s AND r.store_id=%s
                """,
                (reservation_id, cast_id, store_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            options = self._load_options(cur, [r["reservation_id"]])
            return self._to_reservation(r, options.get(r["reservation_id"], ()))

    def count_by_cast(
        self, *, store_id: str, start: datetime, end: datetime, designation_type: Optional[str] = None
    ) -> Mapping[str, int]:
        sql = """
            SELECT cast_id, COUNT(*) AS n
            FROM reservations
            WHERE store_id=%s AND status<>%s AND start_time BETWEEN %s AND %s
        """
        params: list = [store_id, ReservationStatus.CANCELLED.value, start, end]
        if designation_type is not None:
            sql += " AND designation_type=%s"
            params.append(designation_type)
        sql += " GROUP BY cast_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return {r["cast_id"]: int(r["n"]) for r in fetchall(cur)}

    def list_active_start_times(
        self, *, cast_id: str, store_id: str, start: datetime, end: datetime
    ) -> Sequence[datetime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT start_time
                FROM reservations
                WHERE cast_id=%s AND store_id=%s AND status<>%s AND start_time BETWEEN %s AND %s
                ORDER BY start_time
                """,
                (cast_id, store_id, ReservationStatus.CANCELLED.value, start, end),
            )
            return [utc_or_none(r["start_time"]) for r in fetchall(cur)]

    def mark_checked_in(self, *, reservation_id: str, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE reservations SET cast_checked_in_at=%s
                WHERE reservation_id=%s AND cast_checked_in_at IS NULL
                """,
                (at, reservation_id),
            )
            return cur.rowcount > 0

    def mark_checked_out(self, *, reservation_id: str, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE reservations SET cast_checked_out_at=%s
                WHERE reservation_id=%s AND cast_checked_in_at IS NOT NULL AND cast_checked_out_at IS NULL
                """,
                (at, reservation_id),
            )
            return cur.rowcount > 0

    @staticmethod
    def _load_options(cur, reservation_ids: list[str]) -> dict[str, tuple[ReservationOption, ...]]:
        if not reservation_ids:
            return {}

        cur.execute(
            f"""
            SELECT ro.reservation_id, ro.option_id, ro.option_name, ro.option_price,
                   ro.store_share, ro.cast_share,
                   o.name AS joined_name, o.price AS joined_price
            FROM reservation_options ro
            LEFT JOIN options o ON o.option_id = ro.option_id
            WHERE ro.reservation_id IN ({in_clause(reservation_ids)})
            ORDER BY ro.reservation_id, ro.option_id
            """,
            tuple(reservation_ids),
        )
        grouped: dict[str, list[ReservationOption]] = defaultdict(list)
        for r in fetchall(cur):
            joined = None
            if r.get("joined_name") is not None:
                joined = OptionRef(name=r["joined_name"], price=int(r.get("joined_price") or 0))
            grouped[r["reservation_id"]].append(
                ReservationOption(
                    option_id=r["option_id"],
                    option_name=r.get("option_name"),
                    option_price=int_or_none(r.get("option_price")),
                    option=joined,
                    store_share=int_or_none(r.get("store_share")),
                    cast_share=int_or_none(r.get("cast_share")),
                )
            )
        return {rid: tuple(items) for rid, items in grouped.items()}

    @staticmethod
    def _to_reservation(r: dict, options: tuple[ReservationOption, ...]) -> Reservation:
        course = None
        if r.get("course_name") is not None:
            course = CourseRef(
                name=r["course_name"],
                duration=int_or_none(r.get("course_duration")),
                price=int_or_none(r.get("course_price")),
            )
        area = None
        if r.get("area_name") is not None:
            area = AreaRef(name=r["area_name"], description=r.get("area_description"))

        return Reservation(
            reservation_id=r["reservation_id"],
            store_id=r["store_id"],
            cast_id=r["cast_id"],
            start_time=utc_or_none(r["start_time"]),
            end_time=utc_or_none(r["end_time"]),
            status=ReservationStatus(r["status"]),
            price=int(r.get("price") or 0),
            customer_id=r.get("customer_id"),
            customer_name=r.get("customer_name"),
            staff_revenue=int_or_none(r.get("staff_revenue")),
            store_revenue=int_or_none(r.get("store_revenue")),
            welfare_expense=int_or_none(r.get("welfare_expense")),
            designation_type=r.get("designation_type"),
            designation_fee=int_or_none(r.get("designation_fee")),
            transportation_fee=int_or_none(r.get("transportation_fee")),
            additional_fee=int_or_none(r.get("additional_fee")),
            discount_amount=int_or_none(r.get("discount_amount")),
            checked_in_at=utc_or_none(r.get("cast_checked_in_at")),
            checked_out_at=utc_or_none(r.get("cast_checked_out_at")),
            course=course,
            area=area,
            location_memo=r.get("location_memo"),
            notes=r.get("notes"),
            payment_method=r.get("payment_method"),
            marketing_channel=r.get("marketing_channel"),
            options=options,
        )
