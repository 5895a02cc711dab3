"""
Pydantic schemas for session endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from booking.models import SessionWithDetails


class SessionPageResponse(BaseModel):
    """One page of the filtered sessions grid."""

    items: list[SessionWithDetails] = Field(description="Sessions on this page, date ascending")
    page: int = Field(description="0-based page index")
    page_size: int = Field(description="Sessions per page for the requesting device")
    total_items: int = Field(description="Sessions matching the filters")
    total_pages: int = Field(description="Number of pages for the filtered set")
    pagination: list[int] = Field(description="Compact page window, -1 marks an ellipsis")
    waiting_customers: int = Field(description="Bookings waiting for validation across non-archived sessions")
    pending_sessions: int = Field(description="Sessions with status Pending")
    search_fields_version: int = Field(description="Version of the searchable field lists")


class UpcomingSessionsResponse(BaseModel):
    """Sessions shown on the dashboard."""

    sessions: list[SessionWithDetails]
    waiting_customers: int
