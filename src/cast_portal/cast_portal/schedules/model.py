from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import ScheduleDayStatus, ScheduleLockReason


@dataclass(frozen=True)
class CastSchedule:
    """Declared availability window of a cast on one local date."""

    schedule_id: str
    cast_id: str
    schedule_date: date
    start_time: datetime
    end_time: datetime
    is_available: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "castId": self.cast_id,
            "date": self.schedule_date.strftime("%Y-%m-%d"),
            "startTime": to_iso(self.start_time),
            "endTime": to_iso(self.end_time),
            "isAvailable": self.is_available,
        }


@dataclass(frozen=True)
class NewSchedule:
    cast_id: str
    schedule_date: date
    start_time: datetime
    end_time: datetime
    is_available: bool = True


@dataclass(frozen=True)
class ScheduleUpdate:
    """One day of a batch edit coming from the portal."""

    schedule_date: date
    status: ScheduleDayStatus
    start_time: Optional[str] = None
    end_time: Optional[str] = None


@dataclass(frozen=True)
class ScheduleDayEntry:
    id: Optional[str]
    date: str
    is_available: bool
    start_time: str
    end_time: str
    has_reservations: bool
    lock_reasons: tuple[ScheduleLockReason, ...] = field(default_factory=tuple)

    @property
    def can_edit(self) -> bool:
        return not self.lock_reasons

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "isAvailable": self.is_available,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "canEdit": self.can_edit,
            "hasReservations": self.has_reservations,
            "lockReasons": [r.value for r in self.lock_reasons],
        }


@dataclass(frozen=True)
class ScheduleChange:
    """One step of a batch edit; ``entry`` is None when the day is cleared."""

    schedule_date: date
    entry: Optional[NewSchedule] = None
