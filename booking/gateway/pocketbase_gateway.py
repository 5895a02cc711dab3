"""PocketBase implementation of the RemoteDataGateway.

Every call wraps the synchronous PocketBase SDK in ``asyncio.to_thread`` and
converts records into domain models. Store failures are logged and returned
as ``Err`` so that callers can leave their caches untouched.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]
from pydantic import BaseModel

from booking.errors import GatewayError, RecordNotFoundError
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
from booking.result import Err, Ok, Result

from .interfaces import RemoteDataGateway

if TYPE_CHECKING:
    from pocketbase import PocketBase

logger = logging.getLogger(__name__)

SESSIONS = "sessions"
ACTIVITIES = "activities"
SPOTS = "spots"
CUSTOMER_SESSIONS = "customer_sessions"


def record_to_fields(record: Any, model: type[BaseModel]) -> dict[str, Any]:
    """Extract the model's fields from a PocketBase record.

    Missing attributes and null JSON values are dropped so model defaults
    apply.
    """
    fields: dict[str, Any] = {}
    for name in model.model_fields:
        value = getattr(record, name, None)
        if value is not None:
            fields[name] = value
    return fields


class PocketBaseGateway(RemoteDataGateway):
    """Document-store gateway backed by PocketBase collections."""

    def __init__(self, pb: PocketBase) -> None:
        """Initialize with PocketBase client.

        Args:
            pb: PocketBase client instance (already authenticated).
        """
        self.pb = pb

    # ------------------------------------------------------------------
    # Generic collection operations
    # ------------------------------------------------------------------

    def _failure(self, action: str, collection: str, record_id: str | None, exc: Exception) -> Err:
        """Log a store failure and wrap it in an Err."""
        if isinstance(exc, ClientResponseError) and exc.status == 404 and record_id is not None:
            logger.info(f"{collection} record {record_id} not found")
            not_found = RecordNotFoundError(collection, record_id)
            return Err(str(not_found), not_found)

        logger.error(f"PocketBase error during {action} on {collection}: {exc}")
        return Err(f"Could not {action} {collection}", GatewayError(str(exc)))

    async def _list[M: BaseModel](
        self, collection: str, model: type[M], query_params: dict[str, str]
    ) -> Result[list[M]]:
        logger.trace(f"Listing {collection} with {query_params}")  # type: ignore[attr-defined]
        try:
            records = await asyncio.to_thread(
                self.pb.collection(collection).get_full_list,
                query_params=query_params,
            )
            items = [model.model_validate(record_to_fields(r, model)) for r in records]
        except Exception as e:
            return self._failure("list", collection, None, e)

        logger.debug(f"Fetched {len(items)} records from {collection}")
        return Ok(items)

    async def _get[M: BaseModel](self, collection: str, model: type[M], record_id: str) -> Result[M]:
        try:
            record = await asyncio.to_thread(self.pb.collection(collection).get_one, record_id)
            return Ok(model.model_validate(record_to_fields(record, model)))
        except Exception as e:
            return self._failure("read", collection, record_id, e)

    async def _create[M: BaseModel](self, collection: str, model: type[M], payload: BaseModel) -> Result[M]:
        body = payload.model_dump(mode="json")
        try:
            record = await asyncio.to_thread(self.pb.collection(collection).create, body)
            created = model.model_validate({**body, **record_to_fields(record, model)})
        except Exception as e:
            return self._failure("create", collection, None, e)

        logger.info(f"Created {collection} record {created.id}")  # type: ignore[attr-defined]
        return Ok(created, feedback="Created")

    async def _update[M: BaseModel](
        self, collection: str, model: type[M], record_id: str, payload: BaseModel
    ) -> Result[M]:
        body = payload.model_dump(mode="json")
        try:
            record = await asyncio.to_thread(self.pb.collection(collection).update, record_id, body)
            updated = model.model_validate({**body, **record_to_fields(record, model), "id": record_id})
        except Exception as e:
            return self._failure("update", collection, record_id, e)

        logger.info(f"Updated {collection} record {record_id}")
        return Ok(updated, feedback="Updated")

    async def _delete(self, collection: str, record_id: str) -> Result[str]:
        try:
            await asyncio.to_thread(self.pb.collection(collection).delete, record_id)
        except Exception as e:
            return self._failure("delete", collection, record_id, e)

        logger.info(f"Deleted {collection} record {record_id}")
        return Ok(record_id, feedback="Deleted")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def fetch_sessions(self) -> Result[list[Session]]:
        return await self._list(SESSIONS, Session, {"sort": "date"})

    async def get_session(self, session_id: str) -> Result[Session]:
        return await self._get(SESSIONS, Session, session_id)

    async def create_session(self, payload: SessionInput) -> Result[Session]:
        return await self._create(SESSIONS, Session, payload)

    async def update_session(self, session_id: str, payload: SessionInput) -> Result[Session]:
        return await self._update(SESSIONS, Session, session_id, payload)

    async def delete_session(self, session_id: str) -> Result[str]:
        return await self._delete(SESSIONS, session_id)

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    async def fetch_activities(self) -> Result[list[Activity]]:
        return await self._list(ACTIVITIES, Activity, {"sort": "name"})

    async def get_activity(self, activity_id: str) -> Result[Activity]:
        return await self._get(ACTIVITIES, Activity, activity_id)

    async def create_activity(self, payload: ActivityInput) -> Result[Activity]:
        return await self._create(ACTIVITIES, Activity, payload)

    async def update_activity(self, activity_id: str, payload: ActivityInput) -> Result[Activity]:
        return await self._update(ACTIVITIES, Activity, activity_id, payload)

    async def delete_activity(self, activity_id: str) -> Result[str]:
        return await self._delete(ACTIVITIES, activity_id)

    # ------------------------------------------------------------------
    # Spots
    # ------------------------------------------------------------------

    async def fetch_spots(self) -> Result[list[Spot]]:
        return await self._list(SPOTS, Spot, {"sort": "name"})

    async def get_spot(self, spot_id: str) -> Result[Spot]:
        return await self._get(SPOTS, Spot, spot_id)

    async def create_spot(self, payload: SpotInput) -> Result[Spot]:
        return await self._create(SPOTS, Spot, payload)

    async def update_spot(self, spot_id: str, payload: SpotInput) -> Result[Spot]:
        return await self._update(SPOTS, Spot, spot_id, payload)

    async def delete_spot(self, spot_id: str) -> Result[str]:
        return await self._delete(SPOTS, spot_id)

    # ------------------------------------------------------------------
    # Customer sessions
    # ------------------------------------------------------------------

    async def fetch_customer_sessions(self, session_id: str | None = None) -> Result[list[CustomerSession]]:
        query_params = {"sort": "created"}
        if session_id is not None:
            query_params["filter"] = f'session_id = "{session_id}"'
        return await self._list(CUSTOMER_SESSIONS, CustomerSession, query_params)

    async def get_customer_session(self, customer_session_id: str) -> Result[CustomerSession]:
        return await self._get(CUSTOMER_SESSIONS, CustomerSession, customer_session_id)

    async def create_customer_session(self, payload: CustomerSessionInput) -> Result[CustomerSession]:
        return await self._create(CUSTOMER_SESSIONS, CustomerSession, payload)

    async def update_customer_session(
        self, customer_session_id: str, payload: CustomerSessionInput
    ) -> Result[CustomerSession]:
        return await self._update(CUSTOMER_SESSIONS, CustomerSession, customer_session_id, payload)

    async def delete_customer_session(self, customer_session_id: str) -> Result[str]:
        return await self._delete(CUSTOMER_SESSIONS, customer_session_id)
