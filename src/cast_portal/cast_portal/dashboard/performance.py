"""Monthly designation rankings for one cast within its store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..casts.model import Cast
from ..common.datetime_utils import local_date
from ..core.constants import (
    ACCESS_RANKING_LABEL,
    REGULAR_DESIGNATION_LABEL,
    TOTAL_DESIGNATION_LABEL,
)


@dataclass(frozen=True)
class RankMetric:
    label: str
    rank: Optional[int]
    count: Optional[int]

    def to_dict(self) -> dict:
        return {"label": self.label, "rank": self.rank, "count": self.count}


def compute_rank(cast_ids: Sequence[str], counts: Mapping[str, int], target: str) -> tuple[Optional[int], int]:
    """Rank ``target`` by count among ``cast_ids``; casts missing from ``counts`` have 0.

    Equal counts share a rank (1 + number of casts with a strictly higher
    count), so the result does not depend on the order of ``cast_ids``.
    """
    count = counts.get(target, 0)
    if target not in cast_ids:
        return None, count
    higher = sum(1 for cid in cast_ids if counts.get(cid, 0) > count)
    return higher + 1, count


def period_label(now: datetime, tz: str | None = None) -> str:
    day = local_date(now, tz)
    return f"{day.year}年{day.month}月"


@dataclass(frozen=True)
class PerformanceSnapshot:
    cast: Cast
    period_label: str
    total_cast_count: int
    total_designation: RankMetric
    regular_designation: RankMetric
    access: RankMetric

    def to_dict(self) -> dict:
        return {
            "cast": {
                "id": self.cast.cast_id,
                "name": self.cast.name,
                "storeId": self.cast.store_id,
                "storeName": self.cast.store_name,
            },
            "periodLabel": self.period_label,
            "totalCastCount": self.total_cast_count,
            "totalDesignation": self.total_designation.to_dict(),
            "regularDesignation": self.regular_designation.to_dict(),
            "access": self.access.to_dict(),
        }


def build_performance_snapshot(
    *,
    cast: Cast,
    cast_ids: Sequence[str],
    total_counts: Mapping[str, int],
    regular_counts: Mapping[str, int],
    now: datetime,
    tz: str | None = None,
) -> PerformanceSnapshot:
    total_rank, total_count = compute_rank(cast_ids, total_counts, cast.cast_id)
    regular_rank, regular_count = compute_rank(cast_ids, regular_counts, cast.cast_id)
    return PerformanceSnapshot(
        cast=cast,
        period_label=period_label(now, tz),
        total_cast_count=len(cast_ids),
        total_designation=RankMetric(TOTAL_DESIGNATION_LABEL, total_rank, total_count),
        regular_designation=RankMetric(REGULAR_DESIGNATION_LABEL, regular_rank, regular_count),
        # access counts are not recorded
        access=RankMetric(ACCESS_RANKING_LABEL, None, None),
    )
