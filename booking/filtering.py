"""
Filtering and pagination of sessions with details.

Pipeline for the sessions grid:
1. Stable sort by date (ascending)
2. Temporal filter (all, thisWeek, thisMonth, thisQuarter, past)
3. Status filter (all, Actif, Pending, Archived)
4. Free-text search
5. Page slice

The engine never clamps the page index: callers reset to page 0 whenever a
filter or the search term changes.

The bookings page uses a second pipeline: period filter (all, thisMonth or a
quarter label), search, then grouping by month.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from booking.localtime import local_now
from booking.models import SessionWithDetails
from booking.search import search_sessions
from booking.utils.date_utils import add_months, month_abbreviation, month_bounds, quarter_bounds, week_bounds

# Sentinel for an ellipsis slot in the pagination window
ELLIPSIS = -1
MAX_VISIBLE_PAGES = 5

ALL = "all"


class TemporalFilter(StrEnum):
    ALL = "all"
    THIS_WEEK = "thisWeek"
    THIS_MONTH = "thisMonth"
    THIS_QUARTER = "thisQuarter"
    PAST = "past"


@dataclass(frozen=True)
class Page[T]:
    """One page of a filtered collection."""

    items: list[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int


@dataclass(frozen=True)
class QuarterPeriod:
    """A calendar quarter offered as a period filter on the bookings page."""

    label: str
    start_month: int
    end_month: int
    year: int

    def contains(self, value: datetime) -> bool:
        return value.year == self.year and self.start_month <= value.month - 1 <= self.end_month


# ============================================================================
# Sessions grid
# ============================================================================


def sort_by_date(sessions: Iterable[SessionWithDetails]) -> list[SessionWithDetails]:
    """Ascending by date; ties keep their original order."""
    return sorted(sessions, key=lambda s: s.date)


def apply_temporal_filter(
    sessions: Iterable[SessionWithDetails],
    temporal_filter: TemporalFilter | str,
    now: datetime | None = None,
) -> list[SessionWithDetails]:
    """Keep sessions inside the period; unknown filters keep everything."""
    now = now or local_now()

    match temporal_filter:
        case TemporalFilter.THIS_WEEK:
            start, end = week_bounds(now)
        case TemporalFilter.THIS_MONTH:
            start, end = month_bounds(now)
        case TemporalFilter.THIS_QUARTER:
            start, end = quarter_bounds(now)
        case TemporalFilter.PAST:
            return [s for s in sessions if s.date < now]
        case _:
            return list(sessions)

    return [s for s in sessions if start <= s.date <= end]


def apply_status_filter(sessions: Iterable[SessionWithDetails], status: str | None) -> list[SessionWithDetails]:
    """Exact status match; "all" or an empty status keeps everything."""
    if not status or status == ALL:
        return list(sessions)
    return [s for s in sessions if s.status == status]


def filter_sessions(
    sessions: Iterable[SessionWithDetails],
    temporal_filter: TemporalFilter | str = TemporalFilter.ALL,
    status: str | None = ALL,
    search: str = "",
    now: datetime | None = None,
) -> list[SessionWithDetails]:
    """Sort, then apply the temporal, status and search filters in order."""
    result = sort_by_date(sessions)
    result = apply_temporal_filter(result, temporal_filter, now)
    result = apply_status_filter(result, status)
    return search_sessions(result, search)


def total_pages(total_items: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(total_items / page_size)


def paginate[T](items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice one page; an out-of-range page yields an empty item list."""
    pages = total_pages(len(items), page_size)
    start = page * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=page,
        page_size=page_size,
        total_items=len(items),
        total_pages=pages,
    )


def pagination_range(total: int, current: int) -> list[int]:
    """Compact page window for dot navigation.

    At most five page slots, always including the first and last page, with
    ELLIPSIS (-1) marking skipped runs.

    Example:
        >>> pagination_range(10, 5)
        [0, -1, 4, 5, 6, -1, 9]
    """
    if total <= MAX_VISIBLE_PAGES:
        return list(range(total))

    left_side = MAX_VISIBLE_PAGES // 2
    right_side = total - left_side

    if current <= left_side:
        return [*range(MAX_VISIBLE_PAGES - 1), ELLIPSIS, total - 1]
    if current >= right_side:
        return [0, ELLIPSIS, *range(total - (MAX_VISIBLE_PAGES - 1), total)]
    return [0, ELLIPSIS, current - 1, current, current + 1, ELLIPSIS, total - 1]


# ============================================================================
# Bookings page
# ============================================================================


def quarter_periods(now: datetime | None = None) -> list[QuarterPeriod]:
    """Four consecutive quarters starting with the one containing now."""
    now = now or local_now()
    current_quarter = (now.month - 1) // 3
    periods = []
    for offset in range(4):
        year, start_month = add_months(now.year, current_quarter * 3, offset * 3)
        end_month = start_month + 2
        label = f"{month_abbreviation(start_month)}-{month_abbreviation(end_month)} {year}"
        periods.append(QuarterPeriod(label=label, start_month=start_month, end_month=end_month, year=year))
    return periods


def filter_by_period(
    sessions: Iterable[SessionWithDetails],
    period: str,
    now: datetime | None = None,
) -> list[SessionWithDetails]:
    """Filter by "all", "thisMonth" or a quarter label from quarter_periods()."""
    now = now or local_now()
    if period == ALL:
        return list(sessions)
    if period == TemporalFilter.THIS_MONTH:
        return [s for s in sessions if s.date.year == now.year and s.date.month == now.month]

    quarter = next((q for q in quarter_periods(now) if q.label == period), None)
    if quarter is None:
        return list(sessions)
    return [s for s in sessions if quarter.contains(s.date)]


def group_by_month(sessions: Iterable[SessionWithDetails]) -> dict[int, dict[int, list[SessionWithDetails]]]:
    """Group sessions as {year: {0-based month: [sessions]}}, keeping order."""
    grouped: dict[int, dict[int, list[SessionWithDetails]]] = {}
    for session in sessions:
        grouped.setdefault(session.date.year, {}).setdefault(session.date.month - 1, []).append(session)
    return grouped


def months_with_bookings(grouped: dict[int, dict[int, list[SessionWithDetails]]]) -> list[tuple[int, int]]:
    """(year, month) pairs having at least one session with a booking, sorted."""
    months = [
        (year, month)
        for year, by_month in grouped.items()
        for month, sessions in by_month.items()
        if any(s.customer_sessions for s in sessions)
    ]
    return sorted(months)


def filter_bookings(
    sessions: Iterable[SessionWithDetails],
    period: str = ALL,
    search: str = "",
    now: datetime | None = None,
) -> dict[int, dict[int, list[SessionWithDetails]]]:
    """Bookings page pipeline: sort, period filter, search, group by month."""
    result = filter_by_period(sort_by_date(sessions), period, now)
    return group_by_month(search_sessions(result, search))
