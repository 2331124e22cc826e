"""Time window helpers.

All instants handled by the portal are timezone-aware UTC datetimes. Day and
month boundaries are computed in a single business time zone and converted
back to UTC, so every aggregation agrees on period edges.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIME_ZONE
from ..core.exceptions import ValidationError


def _zone(tz: str | None) -> ZoneInfo:
    return ZoneInfo(tz or DEFAULT_TIME_ZONE)


def now_utc() -> datetime:
    """Current instant.

    Note: Only request entry points call this; everything below them takes `now`.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC (DB storage)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _local_midnight(day: date, tz: str | None) -> datetime:
    return datetime.combine(day, time.min, tzinfo=_zone(tz)).astimezone(timezone.utc)


def local_date(instant: datetime, tz: str | None = None) -> date:
    return as_utc(instant).astimezone(_zone(tz)).date()


def start_of_day(instant: datetime, tz: str | None = None) -> datetime:
    return _local_midnight(local_date(instant, tz), tz)


def end_of_day(instant: datetime, tz: str | None = None) -> datetime:
    next_day = local_date(instant, tz) + timedelta(days=1)
    return _local_midnight(next_day, tz) - timedelta(microseconds=1)


def start_of_month(instant: datetime, tz: str | None = None) -> datetime:
    return _local_midnight(local_date(instant, tz).replace(day=1), tz)


def end_of_month(instant: datetime, tz: str | None = None) -> datetime:
    first = local_date(instant, tz).replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    return _local_midnight(next_first, tz) - timedelta(microseconds=1)


def start_of_local_date(day: date, tz: str | None = None) -> datetime:
    return _local_midnight(day, tz)


def end_of_local_date(day: date, tz: str | None = None) -> datetime:
    return _local_midnight(day + timedelta(days=1), tz) - timedelta(microseconds=1)


def add_minutes(instant: datetime, minutes: int) -> datetime:
    return instant + timedelta(minutes=minutes)


def is_within_interval(instant: datetime, start: datetime, end: datetime) -> bool:
    """Closed interval test: start <= instant <= end."""
    return start <= instant <= end


def to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def date_key(instant: datetime, tz: str | None = None) -> str:
    return local_date(instant, tz).strftime("%Y-%m-%d")


def month_label(instant: datetime, tz: str | None = None) -> str:
    return local_date(instant, tz).strftime("%Y-%m")


def local_time_label(instant: datetime, tz: str | None = None) -> str:
    return as_utc(instant).astimezone(_zone(tz)).strftime("%H:%M")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("日付の形式が正しくありません。")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. A trailing `Z` and naive values are read as UTC."""
    raw = (value or "").strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(raw))
    except ValueError:
        raise ValidationError("時刻の形式が正しくありません。")


def combine_local(day: date, hhmm: str, tz: str | None = None) -> datetime:
    """Local wall-clock `HH:MM` on `day`, returned as UTC."""
    try:
        wall = datetime.strptime((hhmm or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError("時刻の形式が正しくありません。")
    return datetime.combine(day, wall, tzinfo=_zone(tz)).astimezone(timezone.utc)
