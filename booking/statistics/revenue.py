"""
Revenue statistics over sessions with details.

Daily and monthly series are dense: every bucket in the window is present,
with zeroes where nothing happened. Archived sessions are excluded
everywhere; cancelled bookings add no revenue or clients but their session
still counts.

Every computation is fail-soft: an unexpected error is logged and an empty
result returned, so a single malformed record cannot take down a dashboard.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from booking.localtime import local_now
from booking.models import SessionStatus, SessionWithDetails
from booking.utils.date_utils import add_months, month_name

from .breakdown import BreakdownStats, compute_breakdown, session_metrics
from .extractors import extract_activity_name, extract_spot_name

logger = logging.getLogger(__name__)

DAILY_BUCKETS = 31
MONTHLY_BUCKETS = 12


@dataclass
class PeriodStats:
    """One bucket of a daily or monthly series."""

    name: str
    date: str
    revenue: float = 0.0
    sessions: int = 0
    clients: int = 0


@dataclass(frozen=True)
class StatisticsTotals:
    revenue: float
    sessions: int
    clients: int


def fail_soft[R](func: Callable[..., list[R]]) -> Callable[..., list[R]]:
    """Log any exception raised by a statistics computation and return []."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> list[R]:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception(f"Statistics computation {func.__name__} failed")
            return []

    return wrapper


def _countable(sessions: Iterable[SessionWithDetails]) -> list[SessionWithDetails]:
    return [s for s in sessions if s.status != SessionStatus.ARCHIVED]


def _accumulate(bucket: PeriodStats, session: SessionWithDetails) -> None:
    revenue, clients = session_metrics(session.customer_sessions)
    bucket.revenue += revenue
    bucket.sessions += 1
    bucket.clients += clients


@fail_soft
def daily_statistics(
    sessions: Iterable[SessionWithDetails],
    forecast: bool = False,
    today: date | None = None,
) -> list[PeriodStats]:
    """31 daily buckets from the first of the month, or from today when forecasting."""
    today = today or local_now().date()
    start = today if forecast else today.replace(day=1)

    buckets: dict[str, PeriodStats] = {}
    for offset in range(DAILY_BUCKETS):
        day = start + timedelta(days=offset)
        key = day.isoformat()
        buckets[key] = PeriodStats(name=str(day.day), date=key)

    for session in _countable(sessions):
        bucket = buckets.get(session.date.date().isoformat())
        if bucket is not None:
            _accumulate(bucket, session)

    return list(buckets.values())


@fail_soft
def monthly_statistics(
    sessions: Iterable[SessionWithDetails],
    forecast: bool = False,
    today: date | None = None,
) -> list[PeriodStats]:
    """12 monthly buckets from January, or from the current month when forecasting.

    Example:
        >>> [b.name for b in monthly_statistics([], today=date(2024, 6, 10))][:2]
        ['Janvier 2024', 'Février 2024']
    """
    today = today or local_now().date()
    start_month = today.month - 1 if forecast else 0

    buckets: dict[tuple[int, int], PeriodStats] = {}
    for offset in range(MONTHLY_BUCKETS):
        year, month = add_months(today.year, start_month, offset)
        buckets[(year, month)] = PeriodStats(name=f"{month_name(month)} {year}", date=f"{year}-{month + 1:02d}")

    for session in _countable(sessions):
        bucket = buckets.get((session.date.year, session.date.month - 1))
        if bucket is not None:
            _accumulate(bucket, session)

    return list(buckets.values())


@fail_soft
def activity_statistics(sessions: Iterable[SessionWithDetails]) -> list[BreakdownStats]:
    """Sessions, clients and revenue per activity, most booked first."""
    return compute_breakdown(_countable(sessions), extract_activity_name)


@fail_soft
def spot_statistics(sessions: Iterable[SessionWithDetails]) -> list[BreakdownStats]:
    """Sessions, clients and revenue per spot, most booked first."""
    return compute_breakdown(_countable(sessions), extract_spot_name)


def statistics_totals(buckets: Iterable[PeriodStats | BreakdownStats]) -> StatisticsTotals:
    """Sum revenue, sessions and clients over a series."""
    revenue = 0.0
    sessions = 0
    clients = 0
    for bucket in buckets:
        revenue += bucket.revenue
        sessions += bucket.sessions
        clients += bucket.clients
    return StatisticsTotals(revenue=revenue, sessions=sessions, clients=clients)
