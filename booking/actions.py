"""
Booking actions - gateway mutations mirrored into a client's cache stores.

Every action returns the gateway Result unchanged in shape. On ``Ok`` the
affected stores are updated in place (create paths use ``update`` so a
record is never cached twice); on ``Err`` the stores are left untouched.

Customer bookings keep ``places_reserved`` of their session in step: a new
booking reserves its participants, cancelling or deleting releases them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from booking.aggregation import SessionAggregator
from booking.errors import CapacityExceededError
from booking.models import (
    Activity,
    ActivityInput,
    CustomerSession,
    CustomerSessionInput,
    CustomerStatus,
    Session,
    SessionInput,
    Spot,
    SpotInput,
)
from booking.result import Err, Ok, Result

if TYPE_CHECKING:
    from booking.gateway import RemoteDataGateway
    from booking.store import CacheStores

logger = logging.getLogger(__name__)


def _reserved_places(customer_session: CustomerSessionInput) -> int:
    """Places held by a booking; cancelled bookings hold none."""
    return 0 if customer_session.is_cancelled else customer_session.number_of_people


def _session_payload(session: Session, **changes: object) -> SessionInput:
    fields = session.model_dump(exclude={"id"})
    fields.update(changes)
    return SessionInput.model_validate(fields)


class BookingActions:
    """Mutations for one client session's stores."""

    def __init__(self, gateway: RemoteDataGateway, stores: CacheStores) -> None:
        self.gateway = gateway
        self.stores = stores
        self.aggregator = SessionAggregator(gateway)

    # ------------------------------------------------------------------
    # Store helpers
    # ------------------------------------------------------------------

    async def _refresh_detail(self, session_id: str) -> None:
        """Re-aggregate one session into the details store."""
        match await self.aggregator.aggregate(session_id):
            case Ok(data=detail):
                self.stores.sessions_with_details.update(detail)
            case Err(reason=reason):
                logger.warning(f"Could not refresh details of session {session_id}: {reason}")

    def _forget_session(self, session_id: str) -> None:
        session = self.stores.sessions.get(session_id)
        if session is not None:
            self.stores.sessions.delete(session)
        detail = self.stores.sessions_with_details.get(session_id)
        if detail is not None:
            self.stores.sessions_with_details.delete(detail)

    def _replace_relation(self, field: str, record_id: str, value: Activity | Spot | None) -> None:
        """Swap an activity or spot inside every cached detail referencing it."""
        for detail in self.stores.sessions_with_details.items:
            if getattr(detail, f"{field}_id") == record_id:
                self.stores.sessions_with_details.update(detail.model_copy(update={field: value}))

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(self, payload: SessionInput) -> Result[Session]:
        result = await self.gateway.create_session(payload)
        if isinstance(result, Ok):
            self.stores.sessions.update(result.data)
            await self._refresh_detail(result.data.id)
        return result

    async def update_session(self, session_id: str, payload: SessionInput) -> Result[Session]:
        result = await self.gateway.update_session(session_id, payload)
        if isinstance(result, Ok):
            self.stores.sessions.update(result.data)
            await self._refresh_detail(session_id)
        return result

    async def delete_session(self, session_id: str) -> Result[str]:
        result = await self.gateway.delete_session(session_id)
        if isinstance(result, Ok):
            self._forget_session(session_id)
        return result

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    async def create_activity(self, payload: ActivityInput) -> Result[Activity]:
        result = await self.gateway.create_activity(payload)
        if isinstance(result, Ok):
            self.stores.activities.update(result.data)
        return result

    async def update_activity(self, activity_id: str, payload: ActivityInput) -> Result[Activity]:
        result = await self.gateway.update_activity(activity_id, payload)
        if isinstance(result, Ok):
            self.stores.activities.update(result.data)
            self._replace_relation("activity", activity_id, result.data)
        return result

    async def delete_activity(self, activity_id: str) -> Result[str]:
        result = await self.gateway.delete_activity(activity_id)
        if isinstance(result, Ok):
            activity = self.stores.activities.get(activity_id)
            if activity is not None:
                self.stores.activities.delete(activity)
            self._replace_relation("activity", activity_id, None)
        return result

    # ------------------------------------------------------------------
    # Spots
    # ------------------------------------------------------------------

    async def create_spot(self, payload: SpotInput) -> Result[Spot]:
        result = await self.gateway.create_spot(payload)
        if isinstance(result, Ok):
            self.stores.spots.update(result.data)
        return result

    async def update_spot(self, spot_id: str, payload: SpotInput) -> Result[Spot]:
        result = await self.gateway.update_spot(spot_id, payload)
        if isinstance(result, Ok):
            self.stores.spots.update(result.data)
            self._replace_relation("spot", spot_id, result.data)
        return result

    async def delete_spot(self, spot_id: str) -> Result[str]:
        result = await self.gateway.delete_spot(spot_id)
        if isinstance(result, Ok):
            spot = self.stores.spots.get(spot_id)
            if spot is not None:
                self.stores.spots.delete(spot)
            self._replace_relation("spot", spot_id, None)
        return result

    # ------------------------------------------------------------------
    # Customer bookings
    # ------------------------------------------------------------------

    async def _adjust_places(self, session: Session, delta: int) -> Result[Session]:
        """Add delta to the session's places_reserved (never below zero)."""
        if delta == 0:
            return Ok(session)
        reserved = max(0, session.places_reserved + delta)
        result = await self.gateway.update_session(session.id, _session_payload(session, places_reserved=reserved))
        match result:
            case Ok(data=updated):
                self.stores.sessions.update(updated)
            case Err(reason=reason):
                logger.error(f"Could not update places of session {session.id}: {reason}")
        return result

    def _check_capacity(self, session: Session, requested: int) -> Err | None:
        if requested > session.places_available:
            error = CapacityExceededError(session.id, requested, session.places_available)
            logger.info(str(error))
            return Err(str(error), error)
        return None

    async def _with_price(self, session: Session, payload: CustomerSessionInput) -> CustomerSessionInput:
        """Fill in prices from the activity's price table when none were given."""
        if payload.price_total or not session.activity:
            return payload

        match await self.gateway.get_activity(session.activity):
            case Ok(data=activity):
                unit = activity.price_for(payload.type_person, session.type_formule)
            case Err():
                unit = None

        if unit is None:
            return payload
        return payload.model_copy(update={"price_unit": unit, "price_total": unit * payload.number_of_people})

    async def _place_changes(
        self, existing: CustomerSession, payload: CustomerSessionInput
    ) -> Result[list[tuple[Session, int]]]:
        """Sessions whose places_reserved move when existing becomes payload.

        A booking moved to another session releases its places on the old one
        and reserves them on the new one. Only reservations are capacity
        checked; an old session that cannot be read releases nothing.
        """
        deltas = {existing.session_id: -_reserved_places(existing)}
        deltas[payload.session_id] = deltas.get(payload.session_id, 0) + _reserved_places(payload)

        changes: list[tuple[Session, int]] = []
        for session_id, delta in deltas.items():
            if not delta:
                continue
            match await self.gateway.get_session(session_id):
                case Ok(data=session):
                    pass
                case Err(reason=reason) as err:
                    if delta < 0:
                        logger.warning(f"Could not release places of session {session_id}: {reason}")
                        continue
                    return err
            if delta > 0:
                refused = self._check_capacity(session, delta)
                if refused is not None:
                    return refused
            changes.append((session, delta))
        # Reservations before releases.
        changes.sort(key=lambda change: change[1], reverse=True)
        return Ok(changes)

    async def _apply_place_changes(self, changes: list[tuple[Session, int]]) -> Err | None:
        """Apply every change, undoing the applied ones if one fails."""
        applied: list[tuple[Session, int]] = []
        for session, delta in changes:
            match await self._adjust_places(session, delta):
                case Ok(data=updated):
                    applied.append((updated, delta))
                case Err() as err:
                    for updated, done in reversed(applied):
                        await self._adjust_places(updated, -done)
                    return err
        return None

    async def _restore_booking(self, customer_session: CustomerSession) -> None:
        """Write a booking back to its previous state after a failed place update."""
        payload = CustomerSessionInput.model_validate(customer_session.model_dump(exclude={"id"}))
        match await self.gateway.update_customer_session(customer_session.id, payload):
            case Err(reason=reason):
                logger.error(f"Could not restore booking {customer_session.id}: {reason}")

    async def register_customer(self, session_id: str, payload: CustomerSessionInput) -> Result[CustomerSession]:
        """Book a customer on a session if enough places remain.

        If the session's places cannot be reserved the new booking is deleted
        again and the gateway error is returned.
        """
        match await self.gateway.get_session(session_id):
            case Ok(data=session):
                pass
            case Err() as err:
                return err

        refused = self._check_capacity(session, payload.number_of_people)
        if refused is not None:
            return refused

        payload = await self._with_price(session, payload.model_copy(update={"session_id": session_id}))
        result = await self.gateway.create_customer_session(payload)
        if isinstance(result, Err):
            return result

        match await self._adjust_places(session, _reserved_places(result.data)):
            case Err() as err:
                match await self.gateway.delete_customer_session(result.data.id):
                    case Err(reason=reason):
                        logger.error(f"Could not remove unreserved booking {result.data.id}: {reason}")
                return err

        await self._refresh_detail(session_id)
        return result

    async def update_customer_session(
        self, customer_session_id: str, payload: CustomerSessionInput
    ) -> Result[CustomerSession]:
        """Update a booking, moving reserved places by the change in head count.

        A changed ``session_id`` moves the booking: the old session releases
        its places and the new one must have room for them.
        """
        match await self.gateway.get_customer_session(customer_session_id):
            case Ok(data=existing):
                pass
            case Err() as err:
                return err

        payload = payload.model_copy(update={"session_id": payload.session_id or existing.session_id})
        match await self._place_changes(existing, payload):
            case Ok(data=changes):
                pass
            case Err() as err:
                return err

        result = await self.gateway.update_customer_session(customer_session_id, payload)
        if isinstance(result, Err):
            return result

        failed = await self._apply_place_changes(changes)
        if failed is not None:
            await self._restore_booking(existing)
            return failed

        for session_id in dict.fromkeys((existing.session_id, payload.session_id)):
            await self._refresh_detail(session_id)
        return result

    async def cancel_customer_session(self, customer_session_id: str) -> Result[CustomerSession]:
        """Mark a booking as cancelled and release its places."""
        match await self.gateway.get_customer_session(customer_session_id):
            case Ok(data=existing):
                pass
            case Err() as err:
                return err

        if existing.is_cancelled:
            return Ok(existing, feedback="Already cancelled")

        payload = CustomerSessionInput.model_validate(
            {**existing.model_dump(exclude={"id"}), "status": CustomerStatus.CANCELED}
        )
        return await self.update_customer_session(customer_session_id, payload)

    async def delete_customer_session(self, customer_session_id: str) -> Result[str]:
        """Delete a booking, releasing its places unless it was already cancelled.

        The booking stays deleted when its places cannot be released; the
        gateway error is returned so the caller knows the counter is stale.
        """
        match await self.gateway.get_customer_session(customer_session_id):
            case Ok(data=existing):
                pass
            case Err() as err:
                return err

        result = await self.gateway.delete_customer_session(customer_session_id)
        if isinstance(result, Err):
            return result

        failed: Err | None = None
        released = _reserved_places(existing)
        if released:
            match await self.gateway.get_session(existing.session_id):
                case Ok(data=session):
                    match await self._adjust_places(session, -released):
                        case Err() as err:
                            failed = err
                case Err(reason=reason):
                    logger.warning(f"Could not release places of session {existing.session_id}: {reason}")
        await self._refresh_detail(existing.session_id)
        return failed if failed is not None else result
