#!/usr/bin/env python3
"""
Booking API - HTTP API layer for the activity booking dashboard.

This is the main FastAPI application that serves as the backend-for-frontend (BFF)
for the booking dashboard. It exposes:
- Sessions grid with temporal, status and text filters
- Activity and spot catalog management
- Customer bookings grouped by month
- Revenue statistics
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booking.localtime import set_local_timezone
from booking.logging_config import configure_logging, get_logger
from booking.store import StoreRegistry

from .dependencies import authenticate_pb, get_client_id, get_store_registry
from .settings import get_settings

# Configure unified logging format
# Format: 2026-01-06T14:05:52Z [api] LEVEL message
configure_logging(source="api")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()

    # Startup
    if not settings.skip_pb_auth:
        await authenticate_pb()
    else:
        logger.warning("Skipping PocketBase authentication (SKIP_PB_AUTH=true)")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Booking API", description="Activity session booking API", lifespan=lifespan)

    # Load settings
    settings = get_settings()
    set_local_timezone(settings.tz)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    # Register routers
    from .routers import bookings, catalog, sessions, statistics

    app.include_router(sessions.router)
    app.include_router(catalog.router)
    app.include_router(bookings.router)
    app.include_router(statistics.router)

    # Core endpoints (not in a router)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "booking-api"}

    @app.delete("/api/cache")
    async def drop_client_cache(
        client_id: Annotated[str, Depends(get_client_id)],
        registry: Annotated[StoreRegistry, Depends(get_store_registry)],
    ) -> dict[str, str]:
        """Forget the caller's cached data (logout)."""
        registry.drop(client_id)
        return {"status": "cleared", "client_session": client_id}

    return app


# Create app instance for uvicorn
app = create_app()
