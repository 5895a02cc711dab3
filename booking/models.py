"""
Domain models mirroring the PocketBase collections.

Write models (``*Input``) carry the fields accepted on create/update; the
read models add the record ``id``. ``SessionWithDetails`` is a read-only
projection rebuilt on every fetch and never written back.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from booking.localtime import local_to_utc, to_local_naive


class SessionStatus(StrEnum):
    """Lifecycle status of a session."""

    ACTIVE = "Actif"
    PENDING = "Pending"
    ARCHIVED = "Archived"


class CustomerStatus(StrEnum):
    """Status of one customer's booking."""

    WAITING = "Waiting"
    VALIDATED = "Validated"
    CANCELED = "Canceled"


class Formula(StrEnum):
    """Session plan: half day or full day."""

    HALF_DAY = "half_day"
    FULL_DAY = "full_day"


# ============================================================================
# Activities and spots
# ============================================================================


class FormulaPrice(BaseModel):
    """Price of one pricing category for each formula."""

    half_day: float = 0.0
    full_day: float = 0.0


class ActivityInput(BaseModel):
    """Fields accepted when creating or updating an activity."""

    name: str
    description: str = ""
    half_day: bool = True
    full_day: bool = False
    price: dict[str, FormulaPrice] = Field(default_factory=dict)
    min_participants: int = Field(default=1, ge=0)
    max_participants: int = Field(default=1, ge=0)
    min_age: int = Field(default=0, ge=0)
    duration: str = ""
    required_equipment: str = ""

    def price_for(self, category: str, formula: Formula | str) -> float | None:
        """Return the unit price for a pricing category and formula, or None."""
        prices = self.price.get(category)
        if prices is None:
            return None
        return prices.full_day if formula == Formula.FULL_DAY else prices.half_day


class Activity(ActivityInput):
    """Activity record."""

    id: str


class SpotInput(BaseModel):
    """Fields accepted when creating or updating a spot."""

    name: str
    description: str = ""
    location: str = ""
    gps_coordinates: str = ""


class Spot(SpotInput):
    """Spot record."""

    id: str


# ============================================================================
# Customer bookings
# ============================================================================


class Participant(BaseModel):
    """One person attending under a customer booking."""

    first_name: str = ""
    last_name: str = ""
    size: float | None = None
    weight: float | None = None
    price_applicable: float | None = None


class CustomerSessionInput(BaseModel):
    """Fields accepted when registering or updating a customer booking."""

    session_id: str = ""
    first_names: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    people_list: list[Participant] = Field(default_factory=list)
    number_of_people: int = Field(default=0, ge=0)
    type_person: str = ""
    price_unit: float = 0.0
    price_total: float = 0.0
    status: CustomerStatus = CustomerStatus.WAITING

    @model_validator(mode="after")
    def default_number_of_people(self) -> CustomerSessionInput:
        """Fall back to the participant list size when no head count is given."""
        if not self.number_of_people:
            self.number_of_people = len(self.people_list)
        return self

    @property
    def is_cancelled(self) -> bool:
        return self.status == CustomerStatus.CANCELED


class CustomerSession(CustomerSessionInput):
    """Customer booking record."""

    id: str


# ============================================================================
# Sessions
# ============================================================================


class SessionInput(BaseModel):
    """Fields accepted when creating or updating a session."""

    date: datetime
    start_time: str = ""
    end_time: str = ""
    places_max: int = Field(default=0, ge=0)
    places_reserved: int = Field(default=0, ge=0)
    type_formule: Formula = Formula.HALF_DAY
    status: SessionStatus = SessionStatus.ACTIVE
    activity: str = ""
    spot: str = ""

    @field_validator("date", mode="after")
    @classmethod
    def localize_date(cls, v: datetime) -> datetime:
        # PocketBase returns UTC; calendar filters work on local wall-clock time.
        return to_local_naive(v)

    @field_serializer("date", when_used="json")
    def serialize_date(self, v: datetime) -> str:
        """Store dates as UTC, the way PocketBase keeps them."""
        return local_to_utc(v).strftime("%Y-%m-%d %H:%M:%S.000Z")

    @property
    def places_available(self) -> int:
        return self.places_max - self.places_reserved


class Session(SessionInput):
    """Session record."""

    id: str


class SessionWithDetails(Session):
    """Session joined with its activity, spot and customer bookings.

    ``activity`` and ``spot`` are None when the referenced record is missing;
    callers must check before dereferencing. Two projections are equal when
    they describe the same session id.
    """

    activity: Activity | None = None  # type: ignore[assignment]
    spot: Spot | None = None  # type: ignore[assignment]
    customer_sessions: list[CustomerSession] = Field(default_factory=list)
    activity_id: str = ""
    spot_id: str = ""

    @classmethod
    def from_parts(
        cls,
        session: Session,
        activity: Activity | None,
        spot: Spot | None,
        customer_sessions: list[CustomerSession],
    ) -> SessionWithDetails:
        """Build the projection from a session and its resolved relations."""
        fields = session.model_dump(exclude={"activity", "spot"})
        return cls(
            **fields,
            activity=activity,
            spot=spot,
            customer_sessions=customer_sessions,
            activity_id=session.activity,
            spot_id=session.spot,
        )

    def to_session(self) -> Session:
        """Collapse the projection back to a plain session record."""
        fields = self.model_dump(exclude={"activity", "spot", "customer_sessions", "activity_id", "spot_id"})
        return Session(**fields, activity=self.activity_id, spot=self.spot_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SessionWithDetails):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
