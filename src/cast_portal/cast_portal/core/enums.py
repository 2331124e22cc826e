from __future__ import annotations

from enum import Enum


class ReservationStatus(str, Enum):
    """Reservation lifecycle. Transitions only move forward."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AttendanceRequestStatus(str, Enum):
    PENDING = "pending"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def open_statuses(cls) -> tuple["AttendanceRequestStatus", ...]:
        return (cls.PENDING, cls.IN_REVIEW)


class AttendanceRequestType(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    ADJUSTMENT = "adjustment"


class AttendanceAction(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class ReservationScope(str, Enum):
    """Reservation list scopes exposed to the portal."""

    UPCOMING = "upcoming"
    TODAY = "today"
    PAST = "past"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Comparator(str, Enum):
    """Open-ended bound applied to a reservation start time."""

    GTE = "gte"
    LT = "lt"


class ScheduleLockReason(str, Enum):
    NEAR_TERM = "near_term"
    HAS_RESERVATIONS = "has_reservations"


class ScheduleDayStatus(str, Enum):
    WORKING = "working"
    OFF = "off"
