"""Tests for DashboardService."""

from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from booking.errors import GatewayError, RecordNotFoundError
from booking.models import (
    Activity,
    CustomerSession,
    CustomerStatus,
    Participant,
    Session,
    SessionStatus,
    SessionWithDetails,
)
from booking.result import Err, Ok
from booking.store import CacheStore

NOW = datetime(2024, 5, 15, 14, 0)


def make_detail(
    session_id: str,
    when: datetime,
    status: SessionStatus = SessionStatus.ACTIVE,
    bookings: list[CustomerSession] | None = None,
    activity: Activity | None = None,
) -> SessionWithDetails:
    session = Session(
        id=session_id,
        date=when,
        status=status,
        places_max=10,
        activity=activity.id if activity else "",
    )
    return SessionWithDetails.from_parts(session, activity, None, bookings or [])


def make_booking(
    booking_id: str,
    session_id: str,
    price_total: float,
    people: int = 1,
    status: CustomerStatus = CustomerStatus.VALIDATED,
) -> CustomerSession:
    return CustomerSession(
        id=booking_id,
        session_id=session_id,
        last_name="Martin",
        price_total=price_total,
        people_list=[Participant(first_name=f"P{i}") for i in range(people)],
        status=status,
    )


def make_stores(*details: SessionWithDetails):
    """Stores stub exposing only the sessions-with-details cache."""

    async def loader():
        return Ok(list(details))

    return SimpleNamespace(sessions_with_details=CacheStore("sessions_with_details", loader))


def failing_stores():
    async def loader():
        return Err("Could not list sessions", GatewayError("down"))

    return SimpleNamespace(sessions_with_details=CacheStore("sessions_with_details", loader))


@pytest.fixture
def sample_stores():
    paddle = Activity(id="act-1", name="Paddle")
    return make_stores(
        make_detail(
            "may-1",
            datetime(2024, 5, 20, 9, 0),
            bookings=[make_booking("cs-1", "may-1", 60.0, people=2)],
            activity=paddle,
        ),
        make_detail("may-2", datetime(2024, 5, 21, 9, 0), status=SessionStatus.PENDING, activity=paddle),
        make_detail(
            "june-1",
            datetime(2024, 6, 3, 9, 0),
            bookings=[make_booking("cs-2", "june-1", 30.0, status=CustomerStatus.WAITING)],
        ),
        make_detail("april-old", datetime(2024, 4, 2, 9, 0), status=SessionStatus.ARCHIVED),
    )


class TestSessionPage:
    """Tests for session_page."""

    @pytest.mark.asyncio
    async def test_filters_and_paginates(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).session_page("all", "all", "", 1, 3, now=NOW)

        assert isinstance(result, Ok)
        page = result.data
        assert [s.id for s in page.items] == ["june-1"]
        assert page.total_items == 4
        assert page.total_pages == 2
        assert page.pagination == [0, 1]
        assert page.waiting_customers == 1
        assert page.pending_sessions == 1
        assert page.search_fields_version >= 1

    @pytest.mark.asyncio
    async def test_load_failure_is_passed_through(self) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(failing_stores()).session_page("all", "all", "", 0, 6)

        assert isinstance(result, Err)
        assert isinstance(result.error, GatewayError)

    @pytest.mark.asyncio
    async def test_session_detail_not_found(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).session_detail("missing")

        assert isinstance(result.error, RecordNotFoundError)

    @pytest.mark.asyncio
    async def test_upcoming(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).upcoming(now=NOW)

        assert [s.id for s in result.data.sessions] == ["may-1", "may-2", "june-1"]


class TestBookingsPage:
    """Tests for bookings_page."""

    @pytest.mark.asyncio
    async def test_only_months_with_bookings_are_paged(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).bookings_page("all", "", 0, 1, now=NOW)

        page = result.data
        assert page.total_pages == 2
        assert [(m.year, m.month, m.month_name) for m in page.months] == [(2024, 4, "Mai")]
        assert [s.id for s in page.months[0].sessions] == ["may-1", "may-2"]
        assert page.periods[0].label == "Avr-Jui 2024"

    @pytest.mark.asyncio
    async def test_quarter_period_filter(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).bookings_page("Jui-Sep 2024", "", 0, 3, now=NOW)

        assert result.data.months == []
        assert result.data.total_pages == 0


class TestStatistics:
    """Tests for the statistics views."""

    @pytest.mark.asyncio
    async def test_monthly_series_with_totals(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).monthly(today=date(2024, 5, 15))

        series = result.data
        may = next(b for b in series.buckets if b.name == "Mai 2024")
        assert (may.sessions, may.revenue, may.clients) == (2, 60.0, 2)
        assert (series.totals.sessions, series.totals.revenue, series.totals.clients) == (3, 90.0, 3)

    @pytest.mark.asyncio
    async def test_activity_breakdown(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).activities()

        assert [(b.name, b.sessions) for b in result.data.items] == [("Paddle", 2), ("Unknown", 1)]

    @pytest.mark.asyncio
    async def test_summary(self, sample_stores) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(sample_stores).summary()

        summary = result.data
        assert summary.total_sessions == 4
        assert summary.active_sessions == 2
        assert summary.archived_sessions == 1
        assert summary.revenue == 90.0
        assert summary.average_revenue_per_client == 30.0


class TestStaleCache:
    """Tests for serving cached sessions when a reload fails."""

    @pytest.mark.asyncio
    async def test_stale_items_served_when_reload_fails(self) -> None:
        from api.services.dashboard_service import DashboardService

        now = [1_000.0]
        responses = [
            Ok([make_detail("june-1", datetime(2024, 6, 3, 9, 0))]),
            Err("Could not list sessions", GatewayError("down")),
        ]

        async def loader():
            return responses.pop(0)

        store = CacheStore("sessions_with_details", loader, cache_duration=300, clock=lambda: now[0])
        service = DashboardService(SimpleNamespace(sessions_with_details=store))
        await service.load_sessions()
        now[0] += 301

        result = await service.session_page("all", "all", "", 0, 6, now=NOW)

        assert isinstance(result, Ok)
        assert [s.id for s in result.data.items] == ["june-1"]
        assert responses == []

    @pytest.mark.asyncio
    async def test_empty_store_still_fails(self) -> None:
        from api.services.dashboard_service import DashboardService

        result = await DashboardService(failing_stores()).load_sessions()

        assert isinstance(result, Err)
