from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import end_of_day, start_of_day
from ..common.validators import require_limit
from ..core.constants import DEFAULT_RESERVATION_LIST_LIMIT, DEFAULT_TIME_ZONE, MAX_RESERVATION_LIST_LIMIT
from ..core.enums import ReservationScope, SortOrder
from ..core.exceptions import NotFoundError
from .model import Reservation
from .projection import ProjectedReservation, project_reservation, project_reservation_detail
from .query import ReservationQuery
from .repository import ReservationRepository


@dataclass(frozen=True)
class ReservationList:
    items: list[ProjectedReservation]
    scope: ReservationScope

    def to_dict(self) -> dict:
        return {
            "items": [i.to_dict() for i in self.items],
            "meta": {"scope": self.scope.value, "count": len(self.items)},
        }


class ReservationService:
    def __init__(self, reservations: ReservationRepository, *, time_zone: str = DEFAULT_TIME_ZONE):
        self._reservations = reservations
        self._tz = time_zone

    def today(self, cast_id: str, store_id: str, *, now: datetime) -> Sequence[Reservation]:
        return self._reservations.find_for_cast(
            ReservationQuery.between(cast_id, store_id, start_of_day(now, self._tz), end_of_day(now, self._tz))
        )

    def upcoming(self, cast_id: str, store_id: str, *, now: datetime, limit: Optional[int]) -> Sequence[Reservation]:
        return self._reservations.find_for_cast(ReservationQuery.from_(cast_id, store_id, now, limit=limit))

    def past(self, cast_id: str, store_id: str, *, now: datetime, limit: Optional[int]) -> Sequence[Reservation]:
        return self._reservations.find_for_cast(
            ReservationQuery.before(cast_id, store_id, now, limit=limit, order=SortOrder.DESC)
        )

    def list_for_cast(
        self,
        cast_id: str,
        store_id: str,
        *,
        now: datetime,
        scope: ReservationScope = ReservationScope.UPCOMING,
        limit: int = DEFAULT_RESERVATION_LIST_LIMIT,
    ) -> ReservationList:
        limit = require_limit(limit, maximum=MAX_RESERVATION_LIST_LIMIT)

        if scope == ReservationScope.TODAY:
            rows = self.today(cast_id, store_id, now=now)
        elif scope == ReservationScope.PAST:
            rows = self.past(cast_id, store_id, now=now, limit=limit)
        else:
            rows = self.upcoming(cast_id, store_id, now=now, limit=limit)

        return ReservationList(items=[project_reservation(r, now) for r in rows], scope=scope)

    def get_owned(self, cast_id: str, store_id: str, reservation_id: str) -> Reservation:
        reservation = self._reservations.get_for_cast(
            reservation_id=reservation_id, cast_id=cast_id, store_id=store_id
        )
        if not reservation:
            raise NotFoundError("Reservation not found")
        return reservation

    def get_detail(self, cast_id: str, store_id: str, reservation_id: str, *, now: datetime) -> dict:
        return project_reservation_detail(self.get_owned(cast_id, store_id, reservation_id), now).to_dict()
