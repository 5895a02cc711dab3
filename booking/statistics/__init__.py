"""Revenue statistics: daily and monthly series, per-activity and per-spot breakdowns."""

from .breakdown import BreakdownStats, calculate_percentage, compute_breakdown, safe_rate, session_metrics
from .revenue import (
    PeriodStats,
    StatisticsTotals,
    activity_statistics,
    daily_statistics,
    fail_soft,
    monthly_statistics,
    spot_statistics,
    statistics_totals,
)

__all__ = [
    "BreakdownStats",
    "PeriodStats",
    "StatisticsTotals",
    "activity_statistics",
    "calculate_percentage",
    "compute_breakdown",
    "daily_statistics",
    "fail_soft",
    "monthly_statistics",
    "safe_rate",
    "session_metrics",
    "spot_statistics",
    "statistics_totals",
]
