"""
Booking core - sessions, activities, spots and customer bookings.

Layers, leaves first:
- gateway: reads and writes PocketBase collections, returning Results
- aggregation: joins sessions with their activity, spot and bookings
- store: per-client caches with a staleness window
- filtering / search: sessions grid and bookings page views
- statistics: revenue series and breakdowns
- actions: mutations mirrored into the caches
"""

from . import logging_config  # noqa: F401  (registers the TRACE level)
from .errors import BookingError, CapacityExceededError, GatewayError, RecordNotFoundError
from .result import Err, Ok, Result

__all__ = [
    "BookingError",
    "CapacityExceededError",
    "Err",
    "GatewayError",
    "Ok",
    "RecordNotFoundError",
    "Result",
]
