from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CastSchedule, NewSchedule, ScheduleChange


class ScheduleRepository(Protocol):
    def create(self, entry: NewSchedule) -> CastSchedule:
        """Insert one entry.

        Raises the store's duplicate-key integrity error when the cast already
        has an entry on that date.
        """

        raise NotImplementedError

    def list_range(self, *, cast_id: str, store_id: str, start: date, end: date) -> Sequence[CastSchedule]:
        raise NotImplementedError

    def find_available_on(self, *, cast_id: str, store_id: str, day: date) -> Optional[CastSchedule]:
        raise NotImplementedError

    def apply_window(self, *, cast_id: str, changes: Sequence[ScheduleChange]) -> None:
        """Apply ``changes`` in order in a single transaction.

        A change with an entry upserts that day; one without deletes it. When a
        date appears more than once the last change wins.
        """

        raise NotImplementedError
