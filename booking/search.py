"""Free-text search over sessions with details.

Searchable fields are listed explicitly per entity. Bump
``SEARCH_FIELDS_VERSION`` whenever one of the lists changes so clients can
tell that the same query may now match differently.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from booking.models import SessionWithDetails

SEARCH_FIELDS_VERSION = 1

SESSION_SEARCH_FIELDS = ("status", "type_formule", "start_time", "end_time")
ACTIVITY_SEARCH_FIELDS = ("name", "description", "duration")
SPOT_SEARCH_FIELDS = ("name", "description", "location")
CUSTOMER_SEARCH_FIELDS = ("first_names", "last_name", "email", "phone", "status", "type_person")
PARTICIPANT_SEARCH_FIELDS = ("first_name", "last_name")


def _field_values(record: Any, fields: Iterable[str]) -> Iterator[str]:
    for field in fields:
        value = getattr(record, field, None)
        if isinstance(value, str) and value:
            yield value


def searchable_values(session: SessionWithDetails) -> Iterator[str]:
    """Yield every searchable string of a session and its relations."""
    yield from _field_values(session, SESSION_SEARCH_FIELDS)
    if session.activity is not None:
        yield from _field_values(session.activity, ACTIVITY_SEARCH_FIELDS)
    if session.spot is not None:
        yield from _field_values(session.spot, SPOT_SEARCH_FIELDS)
    for booking in session.customer_sessions:
        yield from _field_values(booking, CUSTOMER_SEARCH_FIELDS)
        for participant in booking.people_list:
            yield from _field_values(participant, PARTICIPANT_SEARCH_FIELDS)


def matches_search(session: SessionWithDetails, term: str) -> bool:
    """Case-insensitive substring match against any searchable field."""
    needle = term.casefold()
    return any(needle in value.casefold() for value in searchable_values(session))


def search_sessions(sessions: Iterable[SessionWithDetails], term: str) -> list[SessionWithDetails]:
    """Keep the sessions matching the term; an empty term keeps everything."""
    if not term:
        return list(sessions)
    return [s for s in sessions if matches_search(s, term)]
