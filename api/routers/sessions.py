"""
Sessions Router - sessions grid, dashboard and session mutations.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from booking.actions import BookingActions
from booking.filtering import TemporalFilter
from booking.models import Session, SessionInput, SessionWithDetails
from booking.store import CacheStores

from ..dependencies import get_booking_actions, get_client_stores
from ..schemas.sessions import SessionPageResponse, UpcomingSessionsResponse
from ..services.dashboard_service import DashboardService
from ..settings import Device, get_settings
from ..utils import unwrap

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=SessionPageResponse)
async def list_sessions(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
    period: TemporalFilter = Query(TemporalFilter.ALL, description="Temporal filter"),
    status: str = Query("Actif", description="Session status, or 'all'"),
    search: str = Query("", description="Free-text search"),
    page: int = Query(0, ge=0, description="0-based page index"),
    device: Device = Query(Device.DESKTOP, description="Client layout (sets the page size)"),
) -> SessionPageResponse:
    """Get one page of the sessions grid.

    Sessions are sorted by date, then filtered by period, status and search.
    The page index is not clamped: clients reset to 0 when a filter changes.
    """
    page_size = get_settings().sessions_page_size(device)
    service = DashboardService(stores)
    return unwrap(await service.session_page(period, status, search, page, page_size))


@router.get("/upcoming", response_model=UpcomingSessionsResponse)
async def list_upcoming_sessions(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
) -> UpcomingSessionsResponse:
    """Non-archived sessions from today on, for the dashboard."""
    return unwrap(await DashboardService(stores).upcoming())


@router.get("/{session_id}", response_model=SessionWithDetails)
async def get_session(
    session_id: str,
    stores: Annotated[CacheStores, Depends(get_client_stores)],
) -> SessionWithDetails:
    return unwrap(await DashboardService(stores).session_detail(session_id))


@router.post("", response_model=Session, status_code=201)
async def create_session(
    payload: SessionInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> Session:
    return unwrap(await actions.create_session(payload))


@router.put("/{session_id}", response_model=Session)
async def update_session(
    session_id: str,
    payload: SessionInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> Session:
    return unwrap(await actions.update_session(session_id, payload))


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> dict[str, str]:
    deleted = unwrap(await actions.delete_session(session_id))
    return {"id": deleted, "status": "deleted"}
