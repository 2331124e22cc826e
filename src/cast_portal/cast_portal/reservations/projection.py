"""Client-facing reservation view models.

A projection is a pure function of (reservation, now): it never mutates the
reservation and never exposes the customer's full name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import add_minutes, to_iso
from ..core.constants import (
    CHECK_IN_CLOSES_AFTER_END_MINUTES,
    CHECK_IN_OPENS_BEFORE_MINUTES,
    CUSTOMER_MASK_SUFFIX,
    CUSTOMER_PLACEHOLDER,
)
from .model import Reservation, ReservationOption

# Fields the consumer must be able to tell apart from zero; dropped when absent.
_OPTIONAL_FEE_KEYS = ("designationType", "designationFee", "transportationFee", "additionalFee", "discountAmount")


@dataclass(frozen=True)
class ProjectedOption:
    id: str
    name: Optional[str]
    price: int

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "price": self.price}


@dataclass(frozen=True)
class ProjectedReservation:
    id: str
    status: str
    start_time: str
    end_time: str
    duration_minutes: int
    course_name: Optional[str]
    course_duration: Optional[int]
    customer_alias: str
    location: Optional[str]
    area_name: Optional[str]
    checked_in_at: Optional[str]
    checked_out_at: Optional[str]
    can_check_in: bool
    can_check_out: bool
    options: tuple[ProjectedOption, ...] = field(default_factory=tuple)
    designation_type: Optional[str] = None
    designation_fee: Optional[int] = None
    transportation_fee: Optional[int] = None
    additional_fee: Optional[int] = None
    discount_amount: Optional[int] = None

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "status": self.status,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "courseName": self.course_name,
            "courseDuration": self.course_duration,
            "customerAlias": self.customer_alias,
            "location": self.location,
            "areaName": self.area_name,
            "designationType": self.designation_type,
            "designationFee": self.designation_fee,
            "transportationFee": self.transportation_fee,
            "additionalFee": self.additional_fee,
            "discountAmount": self.discount_amount,
            "checkedInAt": self.checked_in_at,
            "checkedOutAt": self.checked_out_at,
            "canCheckIn": self.can_check_in,
            "canCheckOut": self.can_check_out,
            "options": [o.to_dict() for o in self.options],
        }
        for key in _OPTIONAL_FEE_KEYS:
            if out[key] is None:
                del out[key]
        return out


@dataclass(frozen=True)
class ReservationDetail:
    """Projection plus the back-office fields shown on the reservation page."""

    summary: ProjectedReservation
    course_price: Optional[int]
    store_revenue: Optional[int]
    staff_revenue: Optional[int]
    notes: Optional[str]
    location_memo: Optional[str]
    area_memo: Optional[str]
    payment_method: Optional[str]
    marketing_channel: Optional[str]

    def to_dict(self) -> dict:
        out = self.summary.to_dict()
        out.update(
            {
                "coursePrice": self.course_price,
                "storeRevenue": self.store_revenue,
                "staffRevenue": self.staff_revenue,
                "notes": self.notes,
                "locationMemo": self.location_memo,
                "areaMemo": self.area_memo,
                "paymentMethod": self.payment_method,
                "marketingChannel": self.marketing_channel,
            }
        )
        return out


def mask_customer_name(name: Optional[str]) -> str:
    if not name or not name.strip():
        return CUSTOMER_PLACEHOLDER
    return f"{name.strip()[0]}{CUSTOMER_MASK_SUFFIX}"


def duration_minutes(start: datetime, end: datetime) -> int:
    return max(0, round((end - start).total_seconds() / 60))


def can_check_in(reservation: Reservation, now: datetime) -> bool:
    if reservation.checked_in_at is not None:
        return False
    opens = add_minutes(reservation.start_time, -CHECK_IN_OPENS_BEFORE_MINUTES)
    closes = add_minutes(reservation.end_time, CHECK_IN_CLOSES_AFTER_END_MINUTES)
    return opens < now < closes


def can_check_out(reservation: Reservation, now: datetime) -> bool:
    return (
        reservation.checked_in_at is not None
        and reservation.checked_out_at is None
        and now > reservation.start_time
    )


def project_option(entry: ReservationOption) -> ProjectedOption:
    if entry.option is not None:
        return ProjectedOption(id=entry.option_id, name=entry.option.name, price=entry.option.price)
    return ProjectedOption(id=entry.option_id, name=entry.option_name, price=entry.option_price or 0)


def project_reservation(reservation: Reservation, now: datetime) -> ProjectedReservation:
    course = reservation.course
    return ProjectedReservation(
        id=reservation.reservation_id,
        status=reservation.status.value,
        start_time=to_iso(reservation.start_time),
        end_time=to_iso(reservation.end_time),
        duration_minutes=duration_minutes(reservation.start_time, reservation.end_time),
        course_name=course.name if course else None,
        course_duration=course.duration if course else None,
        customer_alias=mask_customer_name(reservation.customer_name),
        location=reservation.location_memo,
        area_name=reservation.area.name if reservation.area else None,
        checked_in_at=to_iso(reservation.checked_in_at),
        checked_out_at=to_iso(reservation.checked_out_at),
        can_check_in=can_check_in(reservation, now),
        can_check_out=can_check_out(reservation, now),
        options=tuple(project_option(o) for o in reservation.options),
        designation_type=reservation.designation_type,
        designation_fee=reservation.designation_fee,
        transportation_fee=reservation.transportation_fee,
        additional_fee=reservation.additional_fee,
        discount_amount=reservation.discount_amount,
    )


def project_reservation_detail(reservation: Reservation, now: datetime) -> ReservationDetail:
    area_description = reservation.area.description if reservation.area else None
    return ReservationDetail(
        summary=project_reservation(reservation, now),
        course_price=reservation.course.price if reservation.course else None,
        store_revenue=reservation.store_revenue,
        staff_revenue=reservation.staff_revenue,
        notes=reservation.notes,
        location_memo=reservation.location_memo,
        area_memo=area_description if area_description is not None else reservation.location_memo,
        payment_method=reservation.payment_method,
        marketing_channel=reservation.marketing_channel,
    )
