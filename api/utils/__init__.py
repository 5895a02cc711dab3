"""API utility modules."""

from .results import status_for, unwrap

__all__ = ["status_for", "unwrap"]
