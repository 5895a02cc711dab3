"""
Shared dependencies for the Booking API.

This module provides:
- PocketBase client management (global instance authenticated on startup)
- The document-store gateway
- Per-client cache stores, selected by the X-Client-Session header
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import Depends, Header
from pocketbase import PocketBase

from booking.actions import BookingActions
from booking.gateway import PocketBaseGateway, RemoteDataGateway
from booking.store import CacheStores, StoreRegistry

from .settings import get_settings

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_SESSION = "default"

# ========================================
# PocketBase Client
# ========================================

# Single admin-authenticated client shared by all requests. The PocketBase API
# is stateless; only the authStore is per-client and we never switch users.
_settings = get_settings()
pb_url = _settings.pocketbase_url
pb = PocketBase(pb_url)


async def authenticate_pb() -> None:
    """Authenticate with PocketBase as admin."""
    settings = get_settings()
    try:
        await asyncio.to_thread(
            pb.collection("_superusers").auth_with_password,
            settings.pocketbase_admin_email,
            settings.pocketbase_admin_password,
        )
        logger.info("Successfully authenticated with PocketBase")
    except Exception as e:
        logger.error(f"Failed to authenticate with PocketBase: {e}")
        raise


# ========================================
# Gateway and cache stores
# ========================================

gateway = PocketBaseGateway(pb)
store_registry = StoreRegistry(
    gateway,
    cache_duration=_settings.cache_duration_seconds,
    max_clients=_settings.max_client_sessions,
)


def get_gateway() -> RemoteDataGateway:
    return gateway


def get_store_registry() -> StoreRegistry:
    return store_registry


def get_client_id(x_client_session: Annotated[str | None, Header()] = None) -> str:
    """Client session id from the X-Client-Session header."""
    return x_client_session or DEFAULT_CLIENT_SESSION


def get_client_stores(
    client_id: Annotated[str, Depends(get_client_id)],
    registry: Annotated[StoreRegistry, Depends(get_store_registry)],
) -> CacheStores:
    """FastAPI dependency returning the caller's cache stores."""
    return registry.get(client_id)


def get_booking_actions(
    remote: Annotated[RemoteDataGateway, Depends(get_gateway)],
    stores: Annotated[CacheStores, Depends(get_client_stores)],
) -> BookingActions:
    return BookingActions(remote, stores)


__all__ = [
    "pb",
    "pb_url",
    "authenticate_pb",
    "gateway",
    "store_registry",
    "get_gateway",
    "get_store_registry",
    "get_client_id",
    "get_client_stores",
    "get_booking_actions",
]
