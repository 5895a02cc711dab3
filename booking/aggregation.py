"""Session aggregation - joins sessions with their activity, spot and bookings.

The result is the ``SessionWithDetails`` read model. Missing relations
degrade to ``None`` (activity, spot) or ``[]`` (bookings) instead of failing
the whole aggregation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from booking.models import Activity, CustomerSession, Session, SessionWithDetails, Spot
from booking.result import Err, Ok, Result

if TYPE_CHECKING:
    from booking.gateway import RemoteDataGateway

logger = logging.getLogger(__name__)


class SessionAggregator:
    """Builds SessionWithDetails projections through the gateway."""

    def __init__(self, gateway: RemoteDataGateway) -> None:
        self.gateway = gateway

    async def _resolve(self, session: Session) -> SessionWithDetails:
        """Fetch the relations of one session concurrently and join them."""
        activity_result, spot_result, bookings_result = await asyncio.gather(
            self._get_activity(session.activity),
            self._get_spot(session.spot),
            self.gateway.fetch_customer_sessions(session.id),
        )

        activity: Activity | None = activity_result.data if activity_result else None
        spot: Spot | None = spot_result.data if spot_result else None
        bookings: list[CustomerSession] = bookings_result.data or []

        if activity is None:
            logger.warning(f"Session {session.id}: activity {session.activity!r} not found")
        if spot is None:
            logger.warning(f"Session {session.id}: spot {session.spot!r} not found")
        if isinstance(bookings_result, Err):
            logger.warning(f"Session {session.id}: bookings unavailable ({bookings_result.reason})")

        return SessionWithDetails.from_parts(session, activity, spot, bookings)

    async def _get_activity(self, activity_id: str) -> Result[Activity] | None:
        if not activity_id:
            return None
        return await self.gateway.get_activity(activity_id)

    async def _get_spot(self, spot_id: str) -> Result[Spot] | None:
        if not spot_id:
            return None
        return await self.gateway.get_spot(spot_id)

    async def aggregate(self, session_id: str) -> Result[SessionWithDetails]:
        """Resolve one session with its activity, spot and bookings."""
        match await self.gateway.get_session(session_id):
            case Ok(data=session):
                return Ok(await self._resolve(session))
            case Err() as err:
                return err

    async def aggregate_all(self) -> Result[list[SessionWithDetails]]:
        """Resolve every session; sessions are resolved concurrently."""
        match await self.gateway.fetch_sessions():
            case Ok(data=sessions):
                details = await asyncio.gather(*(self._resolve(s) for s in sessions))
                logger.info(f"Aggregated {len(details)} sessions with details")
                return Ok(list(details))
            case Err() as err:
                return err
