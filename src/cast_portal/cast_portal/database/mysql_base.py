from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..common.datetime_utils import as_utc
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary, buffered=True)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def utc_or_none(value: Optional[datetime]) -> Optional[datetime]:
    """DATETIME columns come back naive; they are stored as UTC."""
    return as_utc(value) if value is not None else None


def int_or_none(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def in_clause(values: Sequence[Any]) -> str:
    return ", ".join(["%s"] * len(values))
