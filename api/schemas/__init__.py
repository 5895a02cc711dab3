"""
Pydantic schemas for the Booking API.

Re-exports all schemas for convenient importing.
"""

from __future__ import annotations

from .bookings import BookingsPageResponse, MonthBookings, QuarterPeriodResponse
from .sessions import SessionPageResponse, UpcomingSessionsResponse
from .statistics import (
    BreakdownListResponse,
    BreakdownResponse,
    PeriodStatsResponse,
    SeriesResponse,
    StatisticsSummaryResponse,
    StatisticsTotals,
)

__all__ = [
    "BookingsPageResponse",
    "BreakdownListResponse",
    "BreakdownResponse",
    "MonthBookings",
    "PeriodStatsResponse",
    "QuarterPeriodResponse",
    "SeriesResponse",
    "SessionPageResponse",
    "StatisticsSummaryResponse",
    "StatisticsTotals",
    "UpcomingSessionsResponse",
]
