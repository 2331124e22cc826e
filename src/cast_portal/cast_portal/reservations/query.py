"""Filter contract for reservation lookups.

Exactly one time filter is active per query: an explicit closed range
`[start, end]`, an open lower bound (`start_time >= start`), or an exclusive
upper bound (`start_time < start`). A query with no start at all returns every
reservation of the cast at the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.validators import require_limit, require_range
from ..core.constants import MAX_RESERVATION_LIST_LIMIT
from ..core.enums import Comparator, SortOrder
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ReservationQuery:
    cast_id: str
    store_id: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    comparator: Comparator = Comparator.GTE
    limit: Optional[int] = None
    order: SortOrder = SortOrder.ASC

    def __post_init__(self):
        if not self.cast_id or not self.store_id:
            raise ValidationError("cast_id and store_id are required")
        if self.end is not None:
            if self.start is None:
                raise ValidationError("end requires start")
            if self.comparator != Comparator.GTE:
                raise ValidationError("comparator applies to open-ended queries only")
            require_range(self.start, self.end)
        require_limit(self.limit, maximum=MAX_RESERVATION_LIST_LIMIT)

    @classmethod
    def between(cls, cast_id: str, store_id: str, start: datetime, end: datetime, **kw) -> "ReservationQuery":
        return cls(cast_id=cast_id, store_id=store_id, start=start, end=end, **kw)

    @classmethod
    def from_(cls, cast_id: str, store_id: str, start: datetime, **kw) -> "ReservationQuery":
        return cls(cast_id=cast_id, store_id=store_id, start=start, comparator=Comparator.GTE, **kw)

    @classmethod
    def before(cls, cast_id: str, store_id: str, start: datetime, **kw) -> "ReservationQuery":
        return cls(cast_id=cast_id, store_id=store_id, start=start, comparator=Comparator.LT, **kw)

    def matches(self, start_time: datetime) -> bool:
        if self.start is None:
            return True
        if self.end is not None:
            return self.start <= start_time <= self.end
        if self.comparator == Comparator.LT:
            return start_time < self.start
        return start_time >= self.start

    def time_clause(self, column: str = "r.start_time") -> tuple[str, list]:
        """SQL fragment and params for the active time filter ('' when none)."""
        if self.start is None:
            return "", []
        if self.end is not None:
            return f"{column} BETWEEN %s AND %s", [self.start, self.end]
        op = "<" if self.comparator == Comparator.LT else ">="
        return f"{column} {op} %s", [self.start]
