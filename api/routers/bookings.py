"""
Bookings Router - customer bookings grouped by month, registration and cancellation.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from booking.actions import BookingActions
from booking.models import CustomerSession, CustomerSessionInput
from booking.store import CacheStores

from ..dependencies import get_booking_actions, get_client_stores
from ..schemas.bookings import BookingsPageResponse
from ..services.dashboard_service import DashboardService
from ..settings import Device, get_settings
from ..utils import unwrap

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.get("", response_model=BookingsPageResponse)
async def list_bookings(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
    period: str = Query("all", description="'all', 'thisMonth' or a quarter label such as 'Avr-Jui 2024'"),
    search: str = Query("", description="Free-text search"),
    page: int = Query(0, ge=0, description="0-based page index over months"),
    device: Device = Query(Device.DESKTOP, description="Client layout (sets the page size)"),
) -> BookingsPageResponse:
    """Get one page of months that have bookings, with their sessions."""
    page_size = get_settings().bookings_page_size(device)
    return unwrap(await DashboardService(stores).bookings_page(period, search, page, page_size))


@router.post("/{session_id}", response_model=CustomerSession, status_code=201)
async def register_customer(
    session_id: str,
    payload: CustomerSessionInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> CustomerSession:
    """Book a customer on a session; 409 when not enough places remain."""
    return unwrap(await actions.register_customer(session_id, payload))


@router.put("/{customer_session_id}", response_model=CustomerSession)
async def update_booking(
    customer_session_id: str,
    payload: CustomerSessionInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> CustomerSession:
    return unwrap(await actions.update_customer_session(customer_session_id, payload))


@router.post("/{customer_session_id}/cancel", response_model=CustomerSession)
async def cancel_booking(
    customer_session_id: str,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> CustomerSession:
    """Cancel a booking and release its places."""
    return unwrap(await actions.cancel_customer_session(customer_session_id))


@router.delete("/{customer_session_id}")
async def delete_booking(
    customer_session_id: str,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> dict[str, str]:
    deleted = unwrap(await actions.delete_customer_session(customer_session_id))
    return {"id": deleted, "status": "deleted"}
