"""
Pydantic schemas for statistics endpoints.

Defines response models for daily/monthly revenue series and the
per-activity and per-spot breakdowns.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PeriodStatsResponse(BaseModel):
    """One day or month of a revenue series."""

    name: str = Field(description="Day number or 'Month year'")
    date: str = Field(description="ISO date (daily) or YYYY-MM (monthly)")
    revenue: float
    sessions: int
    clients: int


class BreakdownResponse(BaseModel):
    """Statistics of one activity or spot."""

    name: str = Field(description="Activity or spot name ('Unknown' when missing)")
    sessions: int
    clients: int
    revenue: float
    percentage: float = Field(description="Share of all counted sessions")


class StatisticsTotals(BaseModel):
    revenue: float
    sessions: int
    clients: int


class SeriesResponse(BaseModel):
    """Dense revenue series with its totals."""

    buckets: list[PeriodStatsResponse]
    totals: StatisticsTotals


class BreakdownListResponse(BaseModel):
    """Breakdown sorted by session count descending, with totals."""

    items: list[BreakdownResponse]
    totals: StatisticsTotals


class StatisticsSummaryResponse(BaseModel):
    """Headline numbers for the dashboard."""

    total_sessions: int
    active_sessions: int
    pending_sessions: int
    archived_sessions: int
    waiting_customers: int
    revenue: float = Field(description="Revenue of non-archived sessions")
    clients: int
    average_revenue_per_client: float
