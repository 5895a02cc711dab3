"""Translate booking Results into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from booking.errors import CapacityExceededError, RecordNotFoundError
from booking.result import Err, Ok, Result


def status_for(err: Err) -> int:
    """HTTP status code for a failed Result."""
    match err.error:
        case RecordNotFoundError():
            return 404
        case CapacityExceededError():
            return 409
        case _:
            return 502


def unwrap[T](result: Result[T]) -> T:
    """Return the data of an Ok or raise the matching HTTPException."""
    match result:
        case Ok(data=data):
            return data
        case Err() as err:
            raise HTTPException(status_code=status_for(err), detail=err.reason)
