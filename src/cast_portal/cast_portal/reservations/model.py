from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import ReservationStatus


@dataclass(frozen=True)
class CourseRef:
    name: str
    duration: Optional[int] = None
    price: Optional[int] = None


@dataclass(frozen=True)
class AreaRef:
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class OptionRef:
    name: str
    price: int


@dataclass(frozen=True)
class ReservationOption:
    """Selected add-on with its denormalized copy and the joined option, if any."""

    option_id: str
    option_name: Optional[str] = None
    option_price: Optional[int] = None
    option: Optional[OptionRef] = None
    store_share: Optional[int] = None
    cast_share: Optional[int] = None


@dataclass(frozen=True)
class Reservation:
    """Domain entity: one booked service interval for a cast at a store.

    Invariant: end_time > start_time. Read-only for this package.
    """

    reservation_id: str
    store_id: str
    cast_id: str
    start_time: datetime
    end_time: datetime
    status: ReservationStatus
    price: int = 0
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    staff_revenue: Optional[int] = None
    store_revenue: Optional[int] = None
    welfare_expense: Optional[int] = None
    designation_type: Optional[str] = None
    designation_fee: Optional[int] = None
    transportation_fee: Optional[int] = None
    additional_fee: Optional[int] = None
    discount_amount: Optional[int] = None
    checked_in_at: Optional[datetime] = None
    checked_out_at: Optional[datetime] = None
    course: Optional[CourseRef] = None
    area: Optional[AreaRef] = None
    location_memo: Optional[str] = None
    notes: Optional[str] = None
    payment_method: Optional[str] = None
    marketing_channel: Optional[str] = None
    options: tuple[ReservationOption, ...] = field(default_factory=tuple)

    @property
    def is_settled(self) -> bool:
        """Checked out and marked completed; anything else is still open."""
        return self.checked_out_at is not None and self.status == ReservationStatus.COMPLETED


@dataclass(frozen=True)
class MonthReservationRow:
    """Read-model for monthly revenue folds (only the money/status columns)."""

    price: int
    staff_revenue: Optional[int]
    store_revenue: Optional[int]
    welfare_expense: Optional[int]
    status: ReservationStatus
    checked_out_at: Optional[datetime]

    @property
    def is_settled(self) -> bool:
        return self.checked_out_at is not None and self.status == ReservationStatus.COMPLETED
