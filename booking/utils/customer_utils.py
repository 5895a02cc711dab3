"""Customer booking helpers used by session cards, dashboards and actions."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from booking.localtime import local_now
from booking.models import CustomerSession, CustomerStatus, SessionStatus, SessionWithDetails

from .date_utils import start_of_day


def customer_is_cancelled(customer_sessions: Iterable[CustomerSession]) -> bool:
    """True when at least one booking of the session was cancelled."""
    return any(cs.status == CustomerStatus.CANCELED for cs in customer_sessions)


def customer_is_waiting(customer_sessions: Iterable[CustomerSession]) -> bool:
    """True when at least one booking still waits for validation."""
    return any(cs.status == CustomerStatus.WAITING for cs in customer_sessions)


def customer_waiting_count(customer_sessions: Iterable[CustomerSession]) -> int:
    return sum(1 for cs in customer_sessions if cs.status == CustomerStatus.WAITING)


def count_all_waiting_customers(sessions: Iterable[SessionWithDetails]) -> int:
    """Waiting bookings across all non-archived sessions."""
    return sum(
        customer_waiting_count(s.customer_sessions) for s in sessions if s.status != SessionStatus.ARCHIVED
    )


def calculate_places_reserved(customer_sessions: Iterable[CustomerSession]) -> int:
    """Participants across bookings that are not cancelled."""
    return sum(cs.number_of_people for cs in customer_sessions if not cs.is_cancelled)


def count_sessions_by_status(sessions: Iterable[SessionWithDetails], status: SessionStatus | str) -> int:
    return sum(1 for s in sessions if s.status == status)


def filter_sessions_for_dashboard(
    sessions: Iterable[SessionWithDetails],
    now: datetime | None = None,
) -> list[SessionWithDetails]:
    """Upcoming sessions for the dashboard: not archived, dated today or later.

    Returns:
        Sessions sorted by date ascending.
    """
    today = start_of_day(now or local_now())
    upcoming = [s for s in sessions if s.status != SessionStatus.ARCHIVED and s.date >= today]
    return sorted(upcoming, key=lambda s: s.date)
