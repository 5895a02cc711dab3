"""
Catalog Router - activities and spots.

Listing goes through the client's cache stores; mutations go through the
booking actions so cached session details pick up renamed or deleted
activities and spots.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from booking.actions import BookingActions
from booking.models import Activity, ActivityInput, Spot, SpotInput
from booking.store import CacheStores

from ..dependencies import get_booking_actions, get_client_stores
from ..utils import unwrap

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])


# ============================================================================
# Activities
# ============================================================================


@router.get("/activities", response_model=list[Activity])
async def list_activities(stores: Annotated[CacheStores, Depends(get_client_stores)]) -> list[Activity]:
    return unwrap(await stores.activities.fetch())


@router.post("/activities", response_model=Activity, status_code=201)
async def create_activity(
    payload: ActivityInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> Activity:
    return unwrap(await actions.create_activity(payload))


@router.put("/activities/{activity_id}", response_model=Activity)
async def update_activity(
    activity_id: str,
    payload: ActivityInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> Activity:
    return unwrap(await actions.update_activity(activity_id, payload))


@router.delete("/activities/{activity_id}")
async def delete_activity(
    activity_id: str,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> dict[str, str]:
    deleted = unwrap(await actions.delete_activity(activity_id))
    return {"id": deleted, "status": "deleted"}


# ============================================================================
# Spots
# ============================================================================


@router.get("/spots", response_model=list[Spot])
async def list_spots(stores: Annotated[CacheStores, Depends(get_client_stores)]) -> list[Spot]:
    return unwrap(await stores.spots.fetch())


@router.post("/spots", response_model=Spot, status_code=201)
async def create_spot(
    payload: SpotInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> Spot:
    return unwrap(await actions.create_spot(payload))


@router.put("/spots/{spot_id}", response_model=Spot)
async def update_spot(
    spot_id: str,
    payload: SpotInput,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> Spot:
    return unwrap(await actions.update_spot(spot_id, payload))


@router.delete("/spots/{spot_id}")
async def delete_spot(
    spot_id: str,
    actions: Annotated[BookingActions, Depends(get_booking_actions)],
) -> dict[str, str]:
    deleted = unwrap(await actions.delete_spot(spot_id))
    return {"id": deleted, "status": "deleted"}
