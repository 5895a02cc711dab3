"""Local wall-clock time for calendar filters and statistics.

Dates are kept naive in the configured zone. Until ``set_local_timezone``
is called the process time zone is used.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

_local_tz: tzinfo | None = None


def set_local_timezone(name: str | None) -> None:
    """Use the named IANA zone (e.g. "Europe/Paris"); None restores the process zone."""
    global _local_tz
    _local_tz = ZoneInfo(name) if name else None
    logger.debug(f"Local timezone set to {name or 'process default'}")


def local_timezone() -> tzinfo | None:
    return _local_tz


def local_now() -> datetime:
    """Current naive wall-clock time in the local zone."""
    return datetime.now(_local_tz).replace(tzinfo=None)


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(_local_tz).replace(tzinfo=None)


def local_to_utc(value: datetime) -> datetime:
    """Interpret a naive datetime as local time and convert it to UTC."""
    if value.tzinfo is None and _local_tz is not None:
        value = value.replace(tzinfo=_local_tz)
    return value.astimezone(UTC)
