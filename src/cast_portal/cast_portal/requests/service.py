from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.validators import require_max_length
from ..core.constants import ATTENDANCE_REASON_MAX_LENGTH, RECENT_ATTENDANCE_REQUESTS
from ..core.enums import AttendanceRequestStatus, AttendanceRequestType
from ..core.exceptions import ValidationError
from ..reservations.service import ReservationService
from .repository import AttendanceRequestRepository


class AttendanceRequestService:
    def __init__(self, requests: AttendanceRequestRepository, reservation_service: ReservationService):
        self._requests = requests
        self._reservation_service = reservation_service

    def submit(
        self,
        *,
        cast_id: str,
        store_id: str,
        reservation_id: str,
        type: str,
        requested_time: datetime,
        reason: Optional[str] = None,
    ) -> list[dict]:
        """File a request and return the cast's most recent requests."""
        try:
            request_type = AttendanceRequestType(type)
        except ValueError:
            raise ValidationError("不正な入力です。")

        reason = (reason or "").strip() or None
        require_max_length(reason, "reason", ATTENDANCE_REASON_MAX_LENGTH)

        self._reservation_service.get_owned(cast_id, store_id, reservation_id)

        self._requests.create(
            reservation_id=reservation_id,
            cast_id=cast_id,
            type=request_type,
            requested_time=requested_time,
            reason=reason,
        )
        return self.recent(cast_id)

    def recent(self, cast_id: str) -> list[dict]:
        rows = self._requests.list_recent(cast_id=cast_id, limit=RECENT_ATTENDANCE_REQUESTS)
        return [r.to_summary() for r in rows]

    def recent_open(self, cast_id: str) -> list[dict]:
        rows = self._requests.list_recent(
            cast_id=cast_id,
            limit=RECENT_ATTENDANCE_REQUESTS,
            statuses=AttendanceRequestStatus.open_statuses(),
        )
        return [r.to_summary() for r in rows]

    def count_open(self, cast_id: str) -> int:
        return self._requests.count_by_status(cast_id=cast_id, statuses=AttendanceRequestStatus.open_statuses())
