"""Remote data gateway interface (repository pattern).

Gateways must be swappable and return domain models wrapped in a Result.
Implementations never raise for store failures: they log and return ``Err``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from booking.models import (
    Activity,
    ActivityInput,
    CustomerSession,
    CustomerSessionInput,
    Session,
    SessionInput,
    Spot,
    SpotInput,
)
from booking.result import Result


class RemoteDataGateway(ABC):
    """Interface for reading and mutating canonical booking records."""

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_sessions(self) -> Result[list[Session]]:
        """Return all sessions ordered by date ascending."""
        ...

    @abstractmethod
    async def get_session(self, session_id: str) -> Result[Session]:
        """Return a session by id, or Err(RecordNotFoundError)."""
        ...

    @abstractmethod
    async def create_session(self, payload: SessionInput) -> Result[Session]: ...

    @abstractmethod
    async def update_session(self, session_id: str, payload: SessionInput) -> Result[Session]: ...

    @abstractmethod
    async def delete_session(self, session_id: str) -> Result[str]:
        """Delete a session and return its id."""
        ...

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_activities(self) -> Result[list[Activity]]: ...

    @abstractmethod
    async def get_activity(self, activity_id: str) -> Result[Activity]: ...

    @abstractmethod
    async def create_activity(self, payload: ActivityInput) -> Result[Activity]: ...

    @abstractmethod
    async def update_activity(self, activity_id: str, payload: ActivityInput) -> Result[Activity]: ...

    @abstractmethod
    async def delete_activity(self, activity_id: str) -> Result[str]: ...

    # ------------------------------------------------------------------
    # Spots
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_spots(self) -> Result[list[Spot]]: ...

    @abstractmethod
    async def get_spot(self, spot_id: str) -> Result[Spot]: ...

    @abstractmethod
    async def create_spot(self, payload: SpotInput) -> Result[Spot]: ...

    @abstractmethod
    async def update_spot(self, spot_id: str, payload: SpotInput) -> Result[Spot]: ...

    @abstractmethod
    async def delete_spot(self, spot_id: str) -> Result[str]: ...

    # ------------------------------------------------------------------
    # Customer sessions
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_customer_sessions(self, session_id: str | None = None) -> Result[list[CustomerSession]]:
        """Return customer bookings, optionally restricted to one session."""
        ...

    @abstractmethod
    async def get_customer_session(self, customer_session_id: str) -> Result[CustomerSession]: ...

    @abstractmethod
    async def create_customer_session(self, payload: CustomerSessionInput) -> Result[CustomerSession]: ...

    @abstractmethod
    async def update_customer_session(
        self, customer_session_id: str, payload: CustomerSessionInput
    ) -> Result[CustomerSession]: ...

    @abstractmethod
    async def delete_customer_session(self, customer_session_id: str) -> Result[str]: ...
