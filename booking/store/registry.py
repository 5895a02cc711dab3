"""
Per-client cache stores.

Each client session (browser tab, API consumer) gets its own ``CacheStores``
created on first use; ``drop`` resets and forgets it on logout. At most
``max_clients`` clients are kept; the least recently used one is evicted.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import TYPE_CHECKING

from booking.aggregation import SessionAggregator
from booking.models import Activity, Session, SessionWithDetails, Spot

from .cache_store import DEFAULT_CACHE_DURATION, CacheStore

DEFAULT_MAX_CLIENTS = 200

if TYPE_CHECKING:
    from booking.gateway import RemoteDataGateway

logger = logging.getLogger(__name__)


class CacheStores:
    """The four entity caches of one client session."""

    def __init__(
        self,
        gateway: RemoteDataGateway,
        cache_duration: float = DEFAULT_CACHE_DURATION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        aggregator = SessionAggregator(gateway)
        self.sessions: CacheStore[Session] = CacheStore("sessions", gateway.fetch_sessions, cache_duration, clock)
        self.activities: CacheStore[Activity] = CacheStore(
            "activities", gateway.fetch_activities, cache_duration, clock
        )
        self.spots: CacheStore[Spot] = CacheStore("spots", gateway.fetch_spots, cache_duration, clock)
        self.sessions_with_details: CacheStore[SessionWithDetails] = CacheStore(
            "sessions_with_details", aggregator.aggregate_all, cache_duration, clock
        )

    def reset(self) -> None:
        for store in (self.sessions, self.activities, self.spots, self.sessions_with_details):
            store.reset()


class StoreRegistry:
    """Creates and tracks CacheStores by client session id."""

    def __init__(
        self,
        gateway: RemoteDataGateway,
        cache_duration: float = DEFAULT_CACHE_DURATION,
        clock: Callable[[], float] = time.time,
        max_clients: int = DEFAULT_MAX_CLIENTS,
    ) -> None:
        self._gateway = gateway
        self._cache_duration = cache_duration
        self._clock = clock
        self.max_clients = max_clients
        self._stores: OrderedDict[str, CacheStores] = OrderedDict()

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._stores

    def __len__(self) -> int:
        return len(self._stores)

    def get(self, client_id: str) -> CacheStores:
        """Return the stores for a client, creating them on first use."""
        stores = self._stores.get(client_id)
        if stores is not None:
            self._stores.move_to_end(client_id)
            return stores

        if len(self._stores) >= self.max_clients:
            oldest_id, oldest = self._stores.popitem(last=False)
            oldest.reset()
            logger.info(f"Evicted cache stores for client session {oldest_id}")

        stores = CacheStores(self._gateway, self._cache_duration, self._clock)
        self._stores[client_id] = stores
        logger.info(f"Created cache stores for client session {client_id}")
        return stores

    def drop(self, client_id: str) -> None:
        """Reset and forget a client's stores; unknown ids are ignored."""
        stores = self._stores.pop(client_id, None)
        if stores is not None:
            stores.reset()
            logger.info(f"Dropped cache stores for client session {client_id}")
