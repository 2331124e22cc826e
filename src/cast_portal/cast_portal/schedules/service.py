from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..casts.service import CastService
from ..common.datetime_utils import (
    combine_local,
    end_of_local_date,
    local_date,
    local_time_label,
    start_of_local_date,
)
from ..core.constants import (
    DEFAULT_SCHEDULE_END_TIME,
    DEFAULT_SCHEDULE_START_TIME,
    DEFAULT_SCHEDULE_WINDOW_DAYS,
    DEFAULT_TIME_ZONE,
    MAX_SCHEDULE_WINDOW_DAYS,
    SCHEDULE_EDIT_LOCK_DAYS,
)
from ..core.enums import ScheduleDayStatus, ScheduleLockReason
from ..core.exceptions import ValidationError
from ..reservations.repository import ReservationRepository
from .guard import schedule_conflict_guard
from .model import CastSchedule, NewSchedule, ScheduleChange, ScheduleDayEntry, ScheduleUpdate
from .repository import ScheduleRepository


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        reservations: ReservationRepository,
        casts: CastService,
        *,
        time_zone: str = DEFAULT_TIME_ZONE,
    ):
        self._schedules = schedules
        self._reservations = reservations
        self._casts = casts
        self._tz = time_zone

    def create_entry(
        self,
        *,
        cast_id: str,
        schedule_date: date,
        start: datetime,
        end: datetime,
        is_available: bool = True,
    ) -> CastSchedule:
        if not cast_id:
            raise ValidationError("cast_id is required")
        if end <= start:
            raise ValidationError("終了時刻は開始時刻より後に設定してください。")
        self._casts.resolve_store_id(cast_id)

        entry = NewSchedule(
            cast_id=cast_id,
            schedule_date=schedule_date,
            start_time=start,
            end_time=end,
            is_available=is_available,
        )
        with schedule_conflict_guard(cast_id=cast_id, schedule_date=schedule_date, start=start, end=end):
            return self._schedules.create(entry)

    def create_shift(self, *, cast_id: str, schedule_date: date, start_time: str, end_time: str) -> CastSchedule:
        """Create an entry from local ``HH:MM`` labels on ``schedule_date``."""
        return self.create_entry(
            cast_id=cast_id,
            schedule_date=schedule_date,
            start=combine_local(schedule_date, start_time, self._tz),
            end=combine_local(schedule_date, end_time, self._tz),
        )

    def is_scheduled_on(self, cast_id: str, store_id: str, *, now: datetime) -> bool:
        day = local_date(now, self._tz)
        return self._schedules.find_available_on(cast_id=cast_id, store_id=store_id, day=day) is not None

    def window_bounds(
        self,
        *,
        now: datetime,
        start: Optional[date] = None,
        days: int = DEFAULT_SCHEDULE_WINDOW_DAYS,
    ) -> tuple[date, date]:
        """Resolve the inclusive date range shown by the schedule editor."""
        if isinstance(days, bool) or not isinstance(days, int):
            raise ValidationError("days must be an integer")
        days = max(1, min(days, MAX_SCHEDULE_WINDOW_DAYS))
        first = start or local_date(now, self._tz)
        return first, first + timedelta(days=days - 1)

    def get_window(self, cast_id: str, store_id: str, *, start: date, end: date, now: datetime) -> dict:
        if end < start:
            raise ValidationError("end date must not be earlier than start date")
        if (end - start).days >= MAX_SCHEDULE_WINDOW_DAYS:
            end = start + timedelta(days=MAX_SCHEDULE_WINDOW_DAYS - 1)

        records = {
            s.schedule_date: s
            for s in self._schedules.list_range(cast_id=cast_id, store_id=store_id, start=start, end=end)
        }
        booked = self._booked_days(cast_id, store_id, start, end)
        lock_until = local_date(now, self._tz) + timedelta(days=SCHEDULE_EDIT_LOCK_DAYS)

        items = []
        day = start
        while day <= end:
            lock_reasons = []
            if day < lock_until:
                lock_reasons.append(ScheduleLockReason.NEAR_TERM)
            if day in booked:
                lock_reasons.append(ScheduleLockReason.HAS_RESERVATIONS)
            items.append(self._to_entry(records.get(day), day, day in booked, tuple(lock_reasons)).to_dict())
            day += timedelta(days=1)

        return {
            "items": items,
            "meta": {"startDate": start.strftime("%Y-%m-%d"), "endDate": end.strftime("%Y-%m-%d")},
        }

    def update_window(
        self,
        cast_id: str,
        store_id: str,
        updates: Sequence[ScheduleUpdate],
        *,
        start: date,
        end: date,
        now: datetime,
    ) -> dict:
        if not updates:
            return self.get_window(cast_id, store_id, start=start, end=end, now=now)

        today = local_date(now, self._tz)
        lock_until = today + timedelta(days=SCHEDULE_EDIT_LOCK_DAYS)
        days = [u.schedule_date for u in updates]
        booked = self._booked_days(cast_id, store_id, min(days), max(days))

        changes: list[ScheduleChange] = []
        for update in updates:
            day = update.schedule_date
            if day < today:
                raise ValidationError("過去の日付は編集できません。")
            if day < lock_until:
                raise ValidationError("直近1週間の予定はキャストページから変更できません。店舗スタッフへ連絡してください。")
            if day in booked:
                raise ValidationError("予約が入っている日の出勤予定は変更できません。")

            if update.status == ScheduleDayStatus.OFF:
                changes.append(ScheduleChange(schedule_date=day))
                continue

            if not update.start_time or not update.end_time:
                raise ValidationError("出勤予定には開始時刻と終了時刻が必要です。")
            start_at = combine_local(day, update.start_time, self._tz)
            end_at = combine_local(day, update.end_time, self._tz)
            if end_at <= start_at:
                raise ValidationError("終了時刻は開始時刻より後に設定してください。")
            entry = NewSchedule(cast_id=cast_id, schedule_date=day, start_time=start_at, end_time=end_at)
            changes.append(ScheduleChange(schedule_date=day, entry=entry))

        self._schedules.apply_window(cast_id=cast_id, changes=changes)
        return self.get_window(cast_id, store_id, start=start, end=end, now=now)

    def _booked_days(self, cast_id: str, store_id: str, start: date, end: date) -> set[date]:
        start_times = self._reservations.list_active_start_times(
            cast_id=cast_id,
            store_id=store_id,
            start=start_of_local_date(start, self._tz),
            end=end_of_local_date(end, self._tz),
        )
        return {local_date(t, self._tz) for t in start_times}

    def _to_entry(
        self,
        record: CastSchedule | None,
        day: date,
        has_reservations: bool,
        lock_reasons: tuple[ScheduleLockReason, ...],
    ) -> ScheduleDayEntry:
        if record is None:
            return ScheduleDayEntry(
                id=None,
                date=day.strftime("%Y-%m-%d"),
                is_available=False,
                start_time=DEFAULT_SCHEDULE_START_TIME,
                end_time=DEFAULT_SCHEDULE_END_TIME,
                has_reservations=has_reservations,
                lock_reasons=lock_reasons,
            )
        return ScheduleDayEntry(
            id=record.schedule_id,
            date=day.strftime("%Y-%m-%d"),
            is_available=record.is_available,
            start_time=local_time_label(record.start_time, self._tz),
            end_time=local_time_label(record.end_time, self._tz),
            has_reservations=has_reservations,
            lock_reasons=lock_reasons,
        )
