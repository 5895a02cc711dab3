"""
Pydantic schemas for booking endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from booking.models import SessionWithDetails


class QuarterPeriodResponse(BaseModel):
    """A selectable quarter on the bookings page."""

    label: str = Field(description="Display label, e.g. 'Avr-Jui 2024'")
    start_month: int = Field(description="0-based first month")
    end_month: int = Field(description="0-based last month")
    year: int


class MonthBookings(BaseModel):
    """Sessions of one month that has at least one booking."""

    year: int
    month: int = Field(description="0-based month")
    month_name: str
    sessions: list[SessionWithDetails]


class BookingsPageResponse(BaseModel):
    """One page of months on the bookings page."""

    months: list[MonthBookings]
    page: int
    page_size: int = Field(description="Months per page for the requesting device")
    total_pages: int
    pagination: list[int] = Field(description="Compact page window, -1 marks an ellipsis")
    periods: list[QuarterPeriodResponse] = Field(description="Quarter filters available from the current quarter")
