from __future__ import annotations

from datetime import datetime

import structlog

from ..core.enums import AttendanceAction
from ..core.exceptions import ValidationError
from ..reservations.projection import project_reservation
from ..reservations.repository import ReservationRepository
from ..reservations.service import ReservationService

logger = structlog.get_logger("cast_portal.attendance")


class AttendanceService:
    """Check-in / check-out actions on a reservation owned by the cast."""

    def __init__(self, reservations: ReservationRepository, reservation_service: ReservationService):
        self._reservations = reservations
        self._reservation_service = reservation_service

    def record(
        self,
        *,
        cast_id: str,
        store_id: str,
        reservation_id: str,
        action: AttendanceAction,
        at: datetime,
        now: datetime,
    ) -> dict:
        reservation = self._reservation_service.get_owned(cast_id, store_id, reservation_id)

        if action == AttendanceAction.CHECK_IN:
            if reservation.checked_in_at is not None:
                raise ValidationError("すでにチェックイン済みです。")
            updated = self._reservations.mark_checked_in(reservation_id=reservation_id, at=at)
        else:
            if reservation.checked_in_at is None:
                raise ValidationError("チェックイン前のため、チェックアウトできません。")
            if reservation.checked_out_at is not None:
                raise ValidationError("すでにチェックアウト済みです。")
            if at < reservation.checked_in_at:
                raise ValidationError("チェックアウト時刻が不正です。")
            updated = self._reservations.mark_checked_out(reservation_id=reservation_id, at=at)

        if not updated:
            # Lost a race with another request on the same reservation.
            raise ValidationError("勤怠情報はすでに更新されています。")

        logger.info("attendance_recorded", cast_id=cast_id, reservation_id=reservation_id, action=action.value)
        refreshed = self._reservation_service.get_owned(cast_id, store_id, reservation_id)
        return project_reservation(refreshed, now).to_dict()
