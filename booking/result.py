"""Tagged result type returned by every gateway and booking action.

``Ok`` and ``Err`` both expose ``success``, ``data`` and ``feedback`` so that
callers reading the envelope shape keep working, while new code matches on
the variant:

    match await gateway.fetch_sessions():
        case Ok(data=sessions):
            store.set(sessions)
        case Err(reason=reason):
            logger.warning(reason)
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import BookingError


@dataclass(frozen=True)
class Ok[T]:
    """Successful outcome carrying the payload."""

    data: T
    feedback: str | None = None

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a user-facing reason."""

    reason: str
    error: BookingError | None = None

    @property
    def success(self) -> bool:
        return False

    @property
    def data(self) -> None:
        return None

    @property
    def feedback(self) -> str:
        return self.reason


type Result[T] = Ok[T] | Err
