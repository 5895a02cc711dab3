"""
Root test configuration and fixtures for the booking project.

This conftest.py provides common fixtures for all test categories:
- PocketBase is mocked for every test so nothing connects to a real server
- An in-memory gateway for store, aggregation, action and API tests
- Builders for sessions, activities, spots and bookings

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import itertools
import os
import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any
from unittest.mock import Mock, patch

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Settings are read at import time by api.dependencies
os.environ.setdefault("SKIP_PB_AUTH", "true")

from booking.errors import GatewayError, RecordNotFoundError  # noqa: E402
from booking.gateway import RemoteDataGateway  # noqa: E402
from booking.localtime import set_local_timezone  # noqa: E402
from booking.models import (  # noqa: E402
    Activity,
    ActivityInput,
    CustomerSession,
    CustomerSessionInput,
    CustomerStatus,
    FormulaPrice,
    Participant,
    Session,
    SessionInput,
    SessionStatus,
    SessionWithDetails,
    Spot,
    SpotInput,
)
from booking.result import Err, Ok, Result  # noqa: E402


def create_mock_pocketbase():
    """Create a mock PocketBase instance."""
    mock_pb = Mock()

    mock_collection = Mock()
    mock_collection.auth_with_password = Mock(return_value=True)
    mock_collection.get_full_list = Mock(return_value=[])
    mock_collection.get_one = Mock()
    mock_collection.create = Mock(return_value=Mock(id="mock-id"))
    mock_collection.update = Mock()
    mock_collection.delete = Mock()

    # Make collection callable to return itself for chaining
    mock_pb.collection = Mock(return_value=mock_collection)

    mock_pb.auth_store = Mock()
    mock_pb.auth_store.base_token = "mock-token"

    return mock_pb


@pytest.fixture
def mock_pocketbase():
    """Create a mock PocketBase instance for tests that need it."""
    return create_mock_pocketbase()


@pytest.fixture(autouse=True)
def mock_all_external_services():
    """Automatically mock PocketBase to prevent real connections."""
    if os.environ.get("SKIP_MOCKING") == "true":
        yield {}
        return

    mock_pb = create_mock_pocketbase()
    with patch("pocketbase.PocketBase") as mock_pb_class:
        mock_pb_class.return_value = mock_pb
        yield {"pocketbase": mock_pb}


@pytest.fixture(autouse=True)
def process_timezone():
    """Each test starts on the process time zone; create_app() switches it to TZ."""
    set_local_timezone(None)
    yield
    set_local_timezone(None)


# =============================================================================
# In-memory gateway
# =============================================================================


class InMemoryGateway(RemoteDataGateway):
    """RemoteDataGateway over plain dicts.

    Names listed in ``failing`` (e.g. "fetch_sessions") return a GatewayError
    instead of touching the data. ``calls`` counts invocations per method.
    """

    def __init__(self) -> None:
        self.sessions: dict[str, Session] = {}
        self.activities: dict[str, Activity] = {}
        self.spots: dict[str, Spot] = {}
        self.customer_sessions: dict[str, CustomerSession] = {}
        self.failing: set[str] = set()
        self.calls: dict[str, int] = {}
        self._ids = itertools.count(1)

    def _enter(self, method: str) -> Err | None:
        self.calls[method] = self.calls.get(method, 0) + 1
        if method in self.failing:
            return Err(f"{method} failed", GatewayError(f"{method} failed"))
        return None

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-new-{next(self._ids)}"

    def _read(self, method: str, table: dict[str, Any], collection: str, record_id: str) -> Result[Any]:
        if (err := self._enter(method)) is not None:
            return err
        if record_id not in table:
            missing = RecordNotFoundError(collection, record_id)
            return Err(str(missing), missing)
        return Ok(table[record_id])

    def _remove(self, method: str, table: dict[str, Any], collection: str, record_id: str) -> Result[str]:
        result = self._read(method, table, collection, record_id)
        if isinstance(result, Err):
            return result
        del table[record_id]
        return Ok(record_id, feedback="Deleted")

    def _write(self, method: str, table: dict[str, Any], collection: str, record_id: str, record: Any) -> Result[Any]:
        if (err := self._enter(method)) is not None:
            return err
        if record_id not in table:
            missing = RecordNotFoundError(collection, record_id)
            return Err(str(missing), missing)
        table[record_id] = record
        return Ok(record, feedback="Updated")

    # Sessions
    async def fetch_sessions(self) -> Result[list[Session]]:
        if (err := self._enter("fetch_sessions")) is not None:
            return err
        return Ok(sorted(self.sessions.values(), key=lambda s: s.date))

    async def get_session(self, session_id: str) -> Result[Session]:
        return self._read("get_session", self.sessions, "sessions", session_id)

    async def create_session(self, payload: SessionInput) -> Result[Session]:
        if (err := self._enter("create_session")) is not None:
            return err
        session = Session(**payload.model_dump(), id=self._new_id("ses"))
        self.sessions[session.id] = session
        return Ok(session, feedback="Created")

    async def update_session(self, session_id: str, payload: SessionInput) -> Result[Session]:
        record = Session(**payload.model_dump(), id=session_id)
        return self._write("update_session", self.sessions, "sessions", session_id, record)

    async def delete_session(self, session_id: str) -> Result[str]:
        return self._remove("delete_session", self.sessions, "sessions", session_id)

    # Activities
    async def fetch_activities(self) -> Result[list[Activity]]:
        if (err := self._enter("fetch_activities")) is not None:
            return err
        return Ok(sorted(self.activities.values(), key=lambda a: a.name))

    async def get_activity(self, activity_id: str) -> Result[Activity]:
        return self._read("get_activity", self.activities, "activities", activity_id)

    async def create_activity(self, payload: ActivityInput) -> Result[Activity]:
        if (err := self._enter("create_activity")) is not None:
            return err
        activity = Activity(**payload.model_dump(), id=self._new_id("act"))
        self.activities[activity.id] = activity
        return Ok(activity, feedback="Created")

    async def update_activity(self, activity_id: str, payload: ActivityInput) -> Result[Activity]:
        record = Activity(**payload.model_dump(), id=activity_id)
        return self._write("update_activity", self.activities, "activities", activity_id, record)

    async def delete_activity(self, activity_id: str) -> Result[str]:
        return self._remove("delete_activity", self.activities, "activities", activity_id)

    # Spots
    async def fetch_spots(self) -> Result[list[Spot]]:
        if (err := self._enter("fetch_spots")) is not None:
            return err
        return Ok(sorted(self.spots.values(), key=lambda s: s.name))

    async def get_spot(self, spot_id: str) -> Result[Spot]:
        return self._read("get_spot", self.spots, "spots", spot_id)

    async def create_spot(self, payload: SpotInput) -> Result[Spot]:
        if (err := self._enter("create_spot")) is not None:
            return err
        spot = Spot(**payload.model_dump(), id=self._new_id("spot"))
        self.spots[spot.id] = spot
        return Ok(spot, feedback="Created")

    async def update_spot(self, spot_id: str, payload: SpotInput) -> Result[Spot]:
        record = Spot(**payload.model_dump(), id=spot_id)
        return self._write("update_spot", self.spots, "spots", spot_id, record)

    async def delete_spot(self, spot_id: str) -> Result[str]:
        return self._remove("delete_spot", self.spots, "spots", spot_id)

    # Customer sessions
    async def fetch_customer_sessions(self, session_id: str | None = None) -> Result[list[CustomerSession]]:
        if (err := self._enter("fetch_customer_sessions")) is not None:
            return err
        return Ok([cs for cs in self.customer_sessions.values() if session_id is None or cs.session_id == session_id])

    async def get_customer_session(self, customer_session_id: str) -> Result[CustomerSession]:
        return self._read("get_customer_session", self.customer_sessions, "customer_sessions", customer_session_id)

    async def create_customer_session(self, payload: CustomerSessionInput) -> Result[CustomerSession]:
        if (err := self._enter("create_customer_session")) is not None:
            return err
        booking = CustomerSession(**payload.model_dump(), id=self._new_id("cs"))
        self.customer_sessions[booking.id] = booking
        return Ok(booking, feedback="Created")

    async def update_customer_session(
        self, customer_session_id: str, payload: CustomerSessionInput
    ) -> Result[CustomerSession]:
        record = CustomerSession(**payload.model_dump(), id=customer_session_id)
        return self._write(
            "update_customer_session", self.customer_sessions, "customer_sessions", customer_session_id, record
        )

    async def delete_customer_session(self, customer_session_id: str) -> Result[str]:
        return self._remove(
            "delete_customer_session", self.customer_sessions, "customer_sessions", customer_session_id
        )


@pytest.fixture
def gateway() -> InMemoryGateway:
    """Empty in-memory gateway."""
    return InMemoryGateway()


# =============================================================================
# Record builders
# =============================================================================


def build_activity(activity_id: str = "act-1", name: str = "Paddle", **fields: Any) -> Activity:
    fields.setdefault("price", {"adult": FormulaPrice(half_day=40.0, full_day=70.0)})
    return Activity(id=activity_id, name=name, **fields)


def build_spot(spot_id: str = "spot-1", name: str = "Lac du Bourget", **fields: Any) -> Spot:
    return Spot(id=spot_id, name=name, **fields)


def build_booking(
    booking_id: str = "cs-1",
    session_id: str = "ses-1",
    price_total: float = 0.0,
    people: int = 1,
    status: CustomerStatus = CustomerStatus.VALIDATED,
    **fields: Any,
) -> CustomerSession:
    people_list = [Participant(first_name=f"P{i}", last_name="Martin") for i in range(people)]
    fields.setdefault("last_name", "Martin")
    return CustomerSession(
        id=booking_id,
        session_id=session_id,
        price_total=price_total,
        people_list=people_list,
        status=status,
        **fields,
    )


def build_session(
    session_id: str = "ses-1",
    date: datetime = datetime(2024, 6, 5, 9, 0),
    status: SessionStatus = SessionStatus.ACTIVE,
    activity: str = "act-1",
    spot: str = "spot-1",
    **fields: Any,
) -> Session:
    fields.setdefault("places_max", 10)
    return Session(id=session_id, date=date, status=status, activity=activity, spot=spot, **fields)


def build_detail(
    session_id: str = "ses-1",
    date: datetime = datetime(2024, 6, 5, 9, 0),
    status: SessionStatus = SessionStatus.ACTIVE,
    activity: Activity | None = None,
    spot: Spot | None = None,
    bookings: list[CustomerSession] | None = None,
    **fields: Any,
) -> SessionWithDetails:
    session = build_session(
        session_id,
        date,
        status,
        activity=activity.id if activity else "",
        spot=spot.id if spot else "",
        **fields,
    )
    return SessionWithDetails.from_parts(session, activity, spot, bookings or [])


@pytest.fixture
def make_activity() -> Callable[..., Activity]:
    return build_activity


@pytest.fixture
def make_spot() -> Callable[..., Spot]:
    return build_spot


@pytest.fixture
def make_booking() -> Callable[..., CustomerSession]:
    return build_booking


@pytest.fixture
def make_session() -> Callable[..., Session]:
    return build_session


@pytest.fixture
def make_detail() -> Callable[..., SessionWithDetails]:
    return build_detail


class FakeClock:
    """Manually advanced time source in seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
