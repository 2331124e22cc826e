from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceRequestStatus, AttendanceRequestType


@dataclass(frozen=True)
class AttendanceRequest:
    """A cast's correction request for one reservation's attendance record."""

    request_id: str
    reservation_id: str
    cast_id: str
    type: AttendanceRequestType
    status: AttendanceRequestStatus
    requested_time: datetime
    created_at: datetime
    reason: Optional[str] = None

    def to_summary(self) -> dict:
        out = {
            "id": self.request_id,
            "reservationId": self.reservation_id,
            "status": self.status.value,
            "type": self.type.value,
            "requestedTime": to_iso(self.requested_time),
            "createdAt": to_iso(self.created_at),
        }
        if self.reason is not None:
            out["reason"] = self.reason
        return out
