"""Calendar helpers shared by filters and statistics.

Month indexes are 0-based (January = 0), matching the grouping keys exposed
by the booking views.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

MONTH_NAMES = (
    "Janvier",
    "Février",
    "Mars",
    "Avril",
    "Mai",
    "Juin",
    "Juillet",
    "Août",
    "Septembre",
    "Octobre",
    "Novembre",
    "Décembre",
)


def month_name(month: int) -> str:
    """Return the display name of a 0-based month index."""
    return MONTH_NAMES[month % 12]


def month_abbreviation(month: int) -> str:
    """Return the first three letters of the month name (e.g. "Jan", "Fév")."""
    return month_name(month)[:3]


def format_date(value: datetime | date) -> str:
    """Format a date for display as DD/MM/YYYY."""
    return value.strftime("%d/%m/%Y")


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Sunday 00:00:00.000 to Saturday 23:59:59.999 of the week containing now."""
    days_since_sunday = (now.weekday() + 1) % 7
    start = start_of_day(now - timedelta(days=days_since_sunday))
    end = end_of_day(start + timedelta(days=6))
    return start, end


def add_months(year: int, month: int, offset: int) -> tuple[int, int]:
    """Shift a (year, 0-based month) pair by offset months, wrapping years."""
    total = year * 12 + month + offset
    return total // 12, total % 12


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First day 00:00 to last day 23:59:59.999 of the month containing now."""
    start = datetime(now.year, now.month, 1)
    next_year, next_month = add_months(now.year, now.month - 1, 1)
    end = end_of_day(datetime(next_year, next_month + 1, 1) - timedelta(days=1))
    return start, end


def quarter_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First and last instant of the calendar quarter containing now."""
    first_month = (now.month - 1) // 3 * 3
    start = datetime(now.year, first_month + 1, 1)
    end_year, end_month = add_months(now.year, first_month, 3)
    end = end_of_day(datetime(end_year, end_month + 1, 1) - timedelta(days=1))
    return start, end
