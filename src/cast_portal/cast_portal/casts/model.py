from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Cast:
    """Domain entity: a staff member offering bookable services."""

    cast_id: str
    store_id: str
    name: str
    work_status: str
    image: Optional[str] = None
    store_name: Optional[str] = None
    request_attendance_enabled: bool = False

    def to_card(self) -> dict:
        return {
            "id": self.cast_id,
            "name": self.name,
            "image": self.image,
            "workStatus": self.work_status,
            "storeId": self.store_id,
            "storeName": self.store_name,
            "requestAttendanceEnabled": bool(self.request_attendance_enabled),
        }
