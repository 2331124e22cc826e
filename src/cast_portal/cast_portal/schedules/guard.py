"""Translate the store's uniqueness violation into a domain conflict.

Overlap detection belongs to the schema (one entry per cast per date); this
module only recognizes the duplicate-key and missing-cast signals. No
in-process locking: the constraint is the only thing that holds across
service instances.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator

import structlog
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import to_iso
from ..core.exceptions import ConflictError, NotFoundError

logger = structlog.get_logger("cast_portal.schedules")


def is_duplicate_key(exc: IntegrityError) -> bool:
    return exc.errno == errorcode.ER_DUP_ENTRY


def is_missing_parent(exc: IntegrityError) -> bool:
    return exc.errno == errorcode.ER_NO_REFERENCED_ROW_2


@contextmanager
def schedule_conflict_guard(
    *, cast_id: str, schedule_date: date, start: datetime, end: datetime
) -> Iterator[None]:
    try:
        yield
    except IntegrityError as exc:
        if is_missing_parent(exc):
            # cast removed between lookup and insert
            raise NotFoundError("Cast not found") from exc
        if not is_duplicate_key(exc):
            raise
        detail = {
            "date": schedule_date.strftime("%Y-%m-%d"),
            "start": to_iso(start),
            "end": to_iso(end),
        }
        logger.info("schedule_conflict", cast_id=cast_id, **detail)
        raise ConflictError("この時間帯はすでに登録されています。", cast_id=cast_id, detail=detail) from exc
