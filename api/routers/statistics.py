"""
Statistics Router - revenue series and breakdowns.

Archived sessions are excluded and cancelled bookings add no revenue.
Computations are fail-soft: a broken record yields an empty series rather
than an error response.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from booking.store import CacheStores

from ..dependencies import get_client_stores
from ..schemas.statistics import BreakdownListResponse, SeriesResponse, StatisticsSummaryResponse
from ..services.dashboard_service import DashboardService
from ..utils import unwrap

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/statistics", tags=["statistics"])


@router.get("/daily", response_model=SeriesResponse)
async def get_daily_statistics(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
    forecast: bool = Query(False, description="Start at today instead of the first of the month"),
) -> SeriesResponse:
    """31 daily buckets of revenue, sessions and clients."""
    return unwrap(await DashboardService(stores).daily(forecast=forecast))


@router.get("/monthly", response_model=SeriesResponse)
async def get_monthly_statistics(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
    forecast: bool = Query(False, description="Start at the current month instead of January"),
) -> SeriesResponse:
    """12 monthly buckets of revenue, sessions and clients."""
    return unwrap(await DashboardService(stores).monthly(forecast=forecast))


@router.get("/activities", response_model=BreakdownListResponse)
async def get_activity_statistics(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
) -> BreakdownListResponse:
    return unwrap(await DashboardService(stores).activities())


@router.get("/spots", response_model=BreakdownListResponse)
async def get_spot_statistics(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
) -> BreakdownListResponse:
    return unwrap(await DashboardService(stores).spots())


@router.get("/summary", response_model=StatisticsSummaryResponse)
async def get_statistics_summary(
    stores: Annotated[CacheStores, Depends(get_client_stores)],
) -> StatisticsSummaryResponse:
    return unwrap(await DashboardService(stores).summary())
