"""Attendance state of a cast, derived fresh on every request.

The state is never stored. It picks one target reservation (the ongoing one,
else the next upcoming one) and reuses the projection's check-in/check-out
gates for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

import structlog

from ..common.datetime_utils import add_minutes, is_within_interval, to_iso
from ..core.constants import ONGOING_LEAD_MINUTES, ONGOING_TRAIL_MINUTES
from ..reservations.model import Reservation
from ..reservations.projection import project_reservation

logger = structlog.get_logger("cast_portal.attendance")


@dataclass(frozen=True)
class AttendanceState:
    current_reservation_id: Optional[str]
    can_check_in: bool
    can_check_out: bool
    last_check_in_at: Optional[str]
    last_check_out_at: Optional[str]

    def to_dict(self) -> dict:
        return {
            "currentReservationId": self.current_reservation_id,
            "canCheckIn": self.can_check_in,
            "canCheckOut": self.can_check_out,
            "lastCheckInAt": self.last_check_in_at,
            "lastCheckOutAt": self.last_check_out_at,
        }


def is_ongoing(reservation: Reservation, now: datetime) -> bool:
    return is_within_interval(
        now,
        add_minutes(reservation.start_time, -ONGOING_LEAD_MINUTES),
        add_minutes(reservation.end_time, ONGOING_TRAIL_MINUTES),
    )


def _latest(values) -> Optional[datetime]:
    present = [v for v in values if v is not None]
    return max(present) if present else None


def derive_attendance_state(
    today: Sequence[Reservation],
    upcoming: Sequence[Reservation],
    now: datetime,
) -> AttendanceState:
    """`today` and `upcoming` are expected in ascending start order."""
    ongoing = [r for r in today if is_ongoing(r, now)]
    if len(ongoing) > 1:
        logger.warning(
            "overlapping_ongoing_reservations",
            cast_id=ongoing[0].cast_id,
            reservation_ids=[r.reservation_id for r in ongoing],
            chosen=ongoing[0].reservation_id,
        )

    target = ongoing[0] if ongoing else (upcoming[0] if upcoming else None)

    last_check_in = to_iso(_latest(r.checked_in_at for r in today))
    last_check_out = to_iso(_latest(r.checked_out_at for r in today))

    if target is None:
        return AttendanceState(
            current_reservation_id=None,
            can_check_in=False,
            can_check_out=False,
            last_check_in_at=last_check_in,
            last_check_out_at=last_check_out,
        )

    mapped = project_reservation(target, now)
    return AttendanceState(
        current_reservation_id=mapped.id,
        can_check_in=mapped.can_check_in,
        can_check_out=mapped.can_check_out,
        last_check_in_at=last_check_in,
        last_check_out_at=last_check_out,
    )
