"""
Dashboard statistics derived locally from a list of complaints.

Every function takes an optional ``time_range`` (week, month, quarter, year)
that scopes the population to tickets created in the trailing window ending
at ``now``; without one the whole population is used. Rates and percentages
fall back to 0 for an empty scope.
"""
from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from complaint_desk.core.config import URGENT_LEVELS
from complaint_desk.core.errors import ValidationError
from complaint_desk.models.complaints import ComplaintArea, ComplaintListItem, ComplaintStatus
from complaint_desk.schemas.complaints import ComplaintQuery
from complaint_desk.schemas.statistics import (
    AreaDistribution,
    ComplaintTypeDistribution,
    MonthlyTrend,
    OverviewStatistics,
)
from complaint_desk.utils.dates import as_utc_naive, utc_now
from complaint_desk.utils.filters import matches

WINDOWS = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "quarter": timedelta(days=90),
    "year": timedelta(days=365),
}


def _now(now: Optional[datetime]) -> datetime:
    return as_utc_naive(now) if now is not None else utc_now()


def time_window(time_range: Optional[str], now: Optional[datetime] = None) -> Optional[Tuple[datetime, datetime]]:
    if time_range is None:
        return None
    if time_range not in WINDOWS:
        raise ValidationError(f"Unknown time range: {time_range!r}")
    end = _now(now)
    return end - WINDOWS[time_range], end


def in_scope(
    complaints: Iterable[ComplaintListItem],
    time_range: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ComplaintListItem]:
    window = time_window(time_range, now)
    if window is None:
        return list(complaints)
    scope = ComplaintQuery(date_range=window)
    return [c for c in complaints if matches(c, scope)]


def _ratio(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def _percentage(part: int, whole: int) -> float:
    return round(_ratio(part, whole) * 100, 2)


def _trend(current: int, previous: int) -> str:
    if current > previous:
        return "up"
    if current < previous:
        return "down"
    return "flat"


def overview(
    complaints: Iterable[ComplaintListItem],
    time_range: Optional[str] = None,
    now: Optional[datetime] = None,
    urgent_levels: Sequence[str] = URGENT_LEVELS,
) -> OverviewStatistics:
    scoped = in_scope(complaints, time_range, now)
    completed = [c for c in scoped if c.status == ComplaintStatus.completed]

    hours = [
        (as_utc_naive(c.updated_at) - as_utc_naive(c.created_at)).total_seconds() / 3600
        for c in completed
    ]
    # List projections carry no satisfaction
    scores = [c.satisfaction for c in scoped if getattr(c, "satisfaction", None) is not None]

    return OverviewStatistics(
        total_complaints=len(scoped),
        pending_complaints=sum(1 for c in scoped if c.status == ComplaintStatus.pending),
        completed_complaints=len(completed),
        urgent_complaints=sum(1 for c in scoped if c.level in urgent_levels),
        average_processing_time=round(sum(hours) / len(hours), 2) if hours else 0.0,
        completion_rate=round(_ratio(len(completed), len(scoped)), 4),
        satisfaction_score=round(sum(scores) / len(scores), 2) if scores else 0.0,
        satisfaction_total=len(scores),
    )


def type_distribution(
    complaints: Iterable[ComplaintListItem],
    time_range: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ComplaintTypeDistribution]:
    population = list(complaints)
    scoped = in_scope(population, time_range, now)
    counts = Counter(c.category for c in scoped)

    previous = None
    window = time_window(time_range, now)
    if window is not None:
        start, end = window
        previous_start = start - (end - start)
        previous = Counter(
            c.category for c in population if previous_start <= as_utc_naive(c.created_at) < start
        )

    return [
        ComplaintTypeDistribution(
            type=category,
            count=count,
            percentage=_percentage(count, len(scoped)),
            trend=_trend(count, previous[category]) if previous is not None else "flat",
        )
        for category, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def _months(first: datetime, last: datetime) -> List[str]:
    year, month = first.year, first.month
    keys = []
    while (year, month) <= (last.year, last.month):
        keys.append(f"{year:04d}-{month:02d}")
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return keys


def monthly_trends(
    complaints: Iterable[ComplaintListItem],
    time_range: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[MonthlyTrend]:
    scoped = in_scope(complaints, time_range, now)
    created = [as_utc_naive(c.created_at) for c in scoped]

    window = time_window(time_range, now)
    if window is not None:
        first, last = window
    elif created:
        first, last = min(created), max(created)
    else:
        return []

    totals = Counter(f"{d.year:04d}-{d.month:02d}" for d in created)
    done = Counter(
        f"{d.year:04d}-{d.month:02d}"
        for c, d in zip(scoped, created)
        if c.status == ComplaintStatus.completed
    )

    return [
        MonthlyTrend(
            month=month,
            completion_rate=round(_ratio(done[month], totals[month]), 4),
            total_count=totals[month],
            completed_count=done[month],
        )
        for month in _months(first, last)
    ]


def area_distribution(
    complaints: Iterable[ComplaintListItem],
    time_range: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[AreaDistribution]:
    scoped = in_scope(complaints, time_range, now)
    counts = Counter(ComplaintArea(c.area) for c in scoped)
    return [
        AreaDistribution(area=area, count=counts[area], percentage=_percentage(counts[area], len(scoped)))
        for area in ComplaintArea
    ]
