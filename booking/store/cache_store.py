"""
In-memory cache of one entity collection with a staleness window.

Each store keeps the last fetched items, the time of that fetch and a list of
subscribers. Mutations are synchronous and notify subscribers immediately;
``fetch()`` only calls the loader when the window has elapsed or the store is
empty.

Two overlapping ``fetch()`` calls are not deduplicated: whichever loader
completes last decides the final contents.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

from booking.errors import GatewayError
from booking.result import Err, Ok, Result

logger = logging.getLogger(__name__)

# Default staleness window (5 minutes)
DEFAULT_CACHE_DURATION = 300.0


class Identified(Protocol):
    """Anything keyed by a record id."""

    id: str


type Loader[T] = Callable[[], Awaitable[Result[list[T]]]]
type Subscriber[T] = Callable[[list[T]], None]


class CacheStore[T: Identified]:
    """Cache for one entity type (sessions, activities, spots, details)."""

    def __init__(
        self,
        name: str,
        loader: Loader[T],
        cache_duration: float = DEFAULT_CACHE_DURATION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize an empty store.

        Args:
            name: Entity name used in log messages.
            loader: Coroutine function returning the full collection as a Result.
            cache_duration: Staleness window in seconds.
            clock: Time source in seconds (injectable for tests).
        """
        self.name = name
        self._loader = loader
        self._cache_duration = cache_duration
        self._clock = clock
        self._items: list[T] = []
        self._last_fetch = 0.0
        self._subscribers: list[Subscriber[T]] = []

    @property
    def items(self) -> list[T]:
        """Snapshot of the cached items."""
        return list(self._items)

    @property
    def last_fetch(self) -> float:
        return self._last_fetch

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> T | None:
        """Return the cached item with this id, if any."""
        return next((item for item in self._items if item.id == item_id), None)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        """Register a callback run after every mutation.

        Returns:
            A function that removes the callback.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.items
        for callback in list(self._subscribers):
            callback(snapshot)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set(self, items: list[T]) -> None:
        """Replace the whole collection."""
        self._items = list(items)
        self._notify()

    def update(self, item: T) -> None:
        """Replace the entry with the same id, or append it."""
        for index, existing in enumerate(self._items):
            if existing.id == item.id:
                self._items[index] = item
                break
        else:
            self._items.append(item)
        self._notify()

    def delete(self, item: T) -> None:
        """Remove the entry with the same id; unknown ids are ignored."""
        self._items = [existing for existing in self._items if existing.id != item.id]
        self._notify()

    def add(self, item: T) -> None:
        """Append without checking for an existing id.

        Use ``update`` when the item may already be cached.
        """
        self._items.append(item)
        self._notify()

    def update_last_fetch(self) -> None:
        self._last_fetch = self._clock()

    def reset(self) -> None:
        """Forget all items and the last fetch time."""
        self._items = []
        self._last_fetch = 0.0
        self._notify()

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def is_stale(self) -> bool:
        """True when the window has elapsed or nothing is cached."""
        return self._clock() - self._last_fetch > self._cache_duration or not self._items

    async def fetch(self) -> Result[list[T]]:
        """Reload from the gateway if stale.

        On success the items are replaced and the fetch time is the time the
        request was issued. On failure the cached items stay as they were.
        Never raises.
        """
        current_time = self._clock()
        if not self.is_stale():
            logger.debug(f"Cache hit for {self.name} ({len(self._items)} items)")
            return Ok(self.items)

        logger.debug(f"Cache miss for {self.name}, fetching")
        try:
            result = await self._loader()
        except Exception as e:
            logger.error(f"Unexpected error fetching {self.name}: {e}", exc_info=True)
            return Err(f"Could not load {self.name}", GatewayError(str(e)))

        match result:
            case Ok(data=items):
                self._items = list(items)
                self._last_fetch = current_time
                self._notify()
                logger.info(f"Refreshed {self.name} cache with {len(items)} items")
            case Err(reason=reason):
                logger.warning(f"Keeping stale {self.name} cache: {reason}")

        return result
