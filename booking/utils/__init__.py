"""Booking utility modules."""

from .customer_utils import (
    calculate_places_reserved,
    count_all_waiting_customers,
    count_sessions_by_status,
    customer_is_cancelled,
    customer_is_waiting,
    customer_waiting_count,
    filter_sessions_for_dashboard,
)
from .date_utils import format_date, month_abbreviation, month_name

__all__ = [
    "calculate_places_reserved",
    "count_all_waiting_customers",
    "count_sessions_by_status",
    "customer_is_cancelled",
    "customer_is_waiting",
    "customer_waiting_count",
    "filter_sessions_for_dashboard",
    "format_date",
    "month_abbreviation",
    "month_name",
]
