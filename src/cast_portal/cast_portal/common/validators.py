from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_limit(value: Optional[int], *, maximum: int, field_name: str = "limit") -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")
    if value < 1 or value > maximum:
        raise ValidationError(f"{field_name} must be between 1 and {maximum}")
    return value


def parse_limit(raw: Optional[str], *, default: int, maximum: int) -> int:
    """Parse a query-string limit, rejecting anything outside 1..maximum."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError("limit must be an integer")
    return require_limit(value, maximum=maximum)


def require_range(start: datetime, end: datetime) -> None:
    if end < start:
        raise ValidationError("end must not be earlier than start")


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value
