from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol, Sequence

from .model import MonthReservationRow, Reservation
from .query import ReservationQuery


class ReservationRepository(Protocol):
    def find_for_cast(self, query: ReservationQuery) -> Sequence[Reservation]:
        """Reservations joined with customer/course/area/options, filtered per `query`."""

        raise NotImplementedError

    def find_month_rows(
        self, *, cast_id: str, store_id: str, start: datetime, end: datetime
    ) -> Sequence[MonthReservationRow]:
        """Reduced rows (money and status only) with start_time in [start, end]."""

        raise NotImplementedError

    def get_for_cast(self, *, reservation_id: str, cast_id: str, store_id: str) -> Optional[Reservation]:
        raise NotImplementedError

    def count_by_cast(
        self, *, store_id: str, start: datetime, end: datetime, designation_type: Optional[str] = None
    ) -> Mapping[str, int]:
        """Non-cancelled reservations per cast in the store with start_time in [start, end].

        Casts without reservations are absent from the result.
        """

        raise NotImplementedError

    def list_active_start_times(
        self, *, cast_id: str, store_id: str, start: datetime, end: datetime
    ) -> Sequence[datetime]:
        """Start times of non-cancelled reservations in [start, end]."""

        raise NotImplementedError

    def mark_checked_in(self, *, reservation_id: str, at: datetime) -> bool:
        raise NotImplementedError

    def mark_checked_out(self, *, reservation_id: str, at: datetime) -> bool:
        raise NotImplementedError
