"""Client cache stores mirroring server collections."""

from .cache_store import DEFAULT_CACHE_DURATION, CacheStore
from .registry import DEFAULT_MAX_CLIENTS, CacheStores, StoreRegistry

__all__ = ["DEFAULT_CACHE_DURATION", "DEFAULT_MAX_CLIENTS", "CacheStore", "CacheStores", "StoreRegistry"]
