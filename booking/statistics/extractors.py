"""Field extractor functions for statistics breakdowns.

Each extractor handles missing relations consistently by returning
'Unknown'.
"""

from __future__ import annotations

from booking.models import SessionWithDetails

UNKNOWN = "Unknown"


def extract_activity_name(session: SessionWithDetails) -> str:
    """Extract the activity name, returning 'Unknown' for a missing activity."""
    activity = session.activity
    return activity.name if activity is not None and activity.name else UNKNOWN


def extract_spot_name(session: SessionWithDetails) -> str:
    """Extract the spot name, returning 'Unknown' for a missing spot."""
    spot = session.spot
    return spot.name if spot is not None and spot.name else UNKNOWN
