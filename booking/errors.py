"""Booking error classes.

Errors are carried inside ``Err`` results rather than raised across the
gateway boundary; the HTTP layer maps them to status codes.
"""

from __future__ import annotations


class BookingError(Exception):
    """Base exception for booking data errors."""

    pass


class GatewayError(BookingError):
    """Raised when the document store cannot be read or written."""

    pass


class RecordNotFoundError(GatewayError):
    """Raised when a record id does not exist in its collection."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"{collection} record {record_id} not found")
        self.collection = collection
        self.record_id = record_id


class CapacityExceededError(BookingError):
    """Raised when a booking would push places_reserved above places_max."""

    def __init__(self, session_id: str, requested: int, available: int) -> None:
        super().__init__(f"Session {session_id} has {available} places left, {requested} requested")
        self.session_id = session_id
        self.requested = requested
        self.available = available
