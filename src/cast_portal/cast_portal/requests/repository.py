from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceRequestStatus, AttendanceRequestType
from .model import AttendanceRequest


class AttendanceRequestRepository(Protocol):
    def create(
        self,
        *,
        reservation_id: str,
        cast_id: str,
        type: AttendanceRequestType,
        requested_time: datetime,
        reason: Optional[str],
    ) -> str:
        raise NotImplementedError

    def list_recent(
        self,
        *,
        cast_id: str,
        limit: int,
        statuses: Optional[Sequence[AttendanceRequestStatus]] = None,
    ) -> Sequence[AttendanceRequest]:
        """Newest first."""

        raise NotImplementedError

    def count_by_status(self, *, cast_id: str, statuses: Sequence[AttendanceRequestStatus]) -> int:
        raise NotImplementedError
