"""Generic breakdown calculator for revenue statistics.

Groups sessions by a category (extracted via an extractor function) and
accumulates session count, client count and revenue per category.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from booking.models import CustomerSession, SessionWithDetails


@dataclass(frozen=True)
class BreakdownStats:
    """Statistics for a single breakdown category."""

    name: str
    sessions: int
    clients: int
    revenue: float
    percentage: float


def safe_rate(numerator: float, denominator: float) -> float:
    """Calculate rate, handling division by zero.

    Returns:
        The ratio, or 0.0 if denominator is zero.
    """
    return numerator / denominator if denominator > 0 else 0.0


def calculate_percentage(count: int, total: int) -> float:
    """Calculate percentage (0-100), or 0.0 if total is zero."""
    return (count / total * 100) if total > 0 else 0.0


def session_metrics(customer_sessions: Iterable[CustomerSession]) -> tuple[float, int]:
    """Revenue and client count of a session's bookings.

    Cancelled bookings contribute nothing.

    Returns:
        Tuple of (revenue, clients) where clients is the number of listed
        participants.
    """
    revenue = 0.0
    clients = 0
    for cs in customer_sessions:
        if cs.is_cancelled:
            continue
        revenue += cs.price_total
        clients += len(cs.people_list)
    return revenue, clients


def compute_breakdown(
    sessions: Iterable[SessionWithDetails],
    extractor: Callable[[SessionWithDetails], str],
) -> list[BreakdownStats]:
    """Compute per-category statistics, sorted by session count descending.

    Example:
        >>> from booking.statistics.extractors import extract_activity_name
        >>> result = compute_breakdown(sessions, extract_activity_name)
        >>> result[0].name
        'Paddle'
    """
    stats: dict[str, dict[str, float]] = {}

    for session in sessions:
        key = extractor(session)
        if key not in stats:
            stats[key] = {"sessions": 0, "clients": 0, "revenue": 0.0}
        revenue, clients = session_metrics(session.customer_sessions)
        stats[key]["sessions"] += 1
        stats[key]["clients"] += clients
        stats[key]["revenue"] += revenue

    total = sum(int(s["sessions"]) for s in stats.values())
    result = [
        BreakdownStats(
            name=key,
            sessions=int(s["sessions"]),
            clients=int(s["clients"]),
            revenue=s["revenue"],
            percentage=calculate_percentage(int(s["sessions"]), total),
        )
        for key, s in stats.items()
    ]
    # sorted() is stable: equal counts keep first-seen order
    return sorted(result, key=lambda b: b.sessions, reverse=True)
