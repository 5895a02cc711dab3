"""Dashboard service - view models computed from a client's cache stores.

Reads go through the sessions-with-details store so that repeated page loads
within the staleness window never hit PocketBase. Every method returns a
Result; a failed store load is passed through unchanged.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING

from api.schemas.bookings import BookingsPageResponse, MonthBookings, QuarterPeriodResponse
from api.schemas.sessions import SessionPageResponse, UpcomingSessionsResponse
from api.schemas.statistics import (
    BreakdownListResponse,
    BreakdownResponse,
    PeriodStatsResponse,
    SeriesResponse,
    StatisticsSummaryResponse,
    StatisticsTotals,
)
from booking.errors import RecordNotFoundError
from booking.filtering import (
    filter_bookings,
    filter_sessions,
    months_with_bookings,
    paginate,
    pagination_range,
    quarter_periods,
)
from booking.models import SessionStatus, SessionWithDetails
from booking.result import Err, Ok, Result
from booking.search import SEARCH_FIELDS_VERSION
from booking.statistics import (
    BreakdownStats,
    PeriodStats,
    activity_statistics,
    daily_statistics,
    monthly_statistics,
    safe_rate,
    session_metrics,
    spot_statistics,
    statistics_totals,
)
from booking.utils import count_all_waiting_customers, count_sessions_by_status, filter_sessions_for_dashboard
from booking.utils.date_utils import month_name

if TYPE_CHECKING:
    from booking.store import CacheStores

logger = logging.getLogger(__name__)


def _totals(buckets: list[PeriodStats] | list[BreakdownStats]) -> StatisticsTotals:
    totals = statistics_totals(buckets)
    return StatisticsTotals(revenue=totals.revenue, sessions=totals.sessions, clients=totals.clients)


class DashboardService:
    """Business logic behind the sessions, bookings and statistics views."""

    def __init__(self, stores: CacheStores) -> None:
        """Initialize with the caller's cache stores.

        Args:
            stores: CacheStores of one client session.
        """
        self.stores = stores

    async def load_sessions(self) -> Result[list[SessionWithDetails]]:
        """Sessions with details, from cache when fresh.

        When a reload fails but earlier data is cached, the stale items are
        served with the failure reason as feedback.
        """
        store = self.stores.sessions_with_details
        result = await store.fetch()
        if isinstance(result, Err) and len(store) > 0:
            logger.warning(f"Serving {len(store)} cached sessions after failed reload: {result.reason}")
            return Ok(store.items, feedback=result.reason)
        return result

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def session_page(
        self,
        temporal_filter: str,
        status: str,
        search: str,
        page: int,
        page_size: int,
        now: datetime | None = None,
    ) -> Result[SessionPageResponse]:
        match await self.load_sessions():
            case Ok(data=sessions):
                pass
            case Err() as err:
                return err

        filtered = filter_sessions(sessions, temporal_filter, status, search, now)
        sliced = paginate(filtered, page, page_size)
        return Ok(
            SessionPageResponse(
                items=sliced.items,
                page=sliced.page,
                page_size=sliced.page_size,
                total_items=sliced.total_items,
                total_pages=sliced.total_pages,
                pagination=pagination_range(sliced.total_pages, page),
                waiting_customers=count_all_waiting_customers(sessions),
                pending_sessions=count_sessions_by_status(sessions, SessionStatus.PENDING),
                search_fields_version=SEARCH_FIELDS_VERSION,
            )
        )

    async def upcoming(self, now: datetime | None = None) -> Result[UpcomingSessionsResponse]:
        match await self.load_sessions():
            case Ok(data=sessions):
                return Ok(
                    UpcomingSessionsResponse(
                        sessions=filter_sessions_for_dashboard(sessions, now),
                        waiting_customers=count_all_waiting_customers(sessions),
                    )
                )
            case Err() as err:
                return err

    async def session_detail(self, session_id: str) -> Result[SessionWithDetails]:
        match await self.load_sessions():
            case Ok():
                pass
            case Err() as err:
                return err

        detail = self.stores.sessions_with_details.get(session_id)
        if detail is None:
            error = RecordNotFoundError("sessions", session_id)
            return Err(str(error), error)
        return Ok(detail)

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def bookings_page(
        self,
        period: str,
        search: str,
        page: int,
        page_size: int,
        now: datetime | None = None,
    ) -> Result[BookingsPageResponse]:
        """Months having at least one booking, paged by month."""
        match await self.load_sessions():
            case Ok(data=sessions):
                pass
            case Err() as err:
                return err

        grouped = filter_bookings(sessions, period, search, now)
        sliced = paginate(months_with_bookings(grouped), page, page_size)
        months = [
            MonthBookings(year=year, month=month, month_name=month_name(month), sessions=grouped[year][month])
            for year, month in sliced.items
        ]
        periods = [
            QuarterPeriodResponse(label=q.label, start_month=q.start_month, end_month=q.end_month, year=q.year)
            for q in quarter_periods(now)
        ]
        return Ok(
            BookingsPageResponse(
                months=months,
                page=sliced.page,
                page_size=sliced.page_size,
                total_pages=sliced.total_pages,
                pagination=pagination_range(sliced.total_pages, page),
                periods=periods,
            )
        )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    async def daily(self, forecast: bool = False, today: date | None = None) -> Result[SeriesResponse]:
        match await self.load_sessions():
            case Ok(data=sessions):
                buckets = daily_statistics(sessions, forecast=forecast, today=today)
                return Ok(self._series(buckets))
            case Err() as err:
                return err

    async def monthly(self, forecast: bool = False, today: date | None = None) -> Result[SeriesResponse]:
        match await self.load_sessions():
            case Ok(data=sessions):
                buckets = monthly_statistics(sessions, forecast=forecast, today=today)
                return Ok(self._series(buckets))
            case Err() as err:
                return err

    async def activities(self) -> Result[BreakdownListResponse]:
        match await self.load_sessions():
            case Ok(data=sessions):
                return Ok(self._breakdown(activity_statistics(sessions)))
            case Err() as err:
                return err

    async def spots(self) -> Result[BreakdownListResponse]:
        match await self.load_sessions():
            case Ok(data=sessions):
                return Ok(self._breakdown(spot_statistics(sessions)))
            case Err() as err:
                return err

    async def summary(self) -> Result[StatisticsSummaryResponse]:
        match await self.load_sessions():
            case Ok(data=sessions):
                pass
            case Err() as err:
                return err

        revenue = 0.0
        clients = 0
        for session in sessions:
            if session.status == SessionStatus.ARCHIVED:
                continue
            session_revenue, session_clients = session_metrics(session.customer_sessions)
            revenue += session_revenue
            clients += session_clients

        return Ok(
            StatisticsSummaryResponse(
                total_sessions=len(sessions),
                active_sessions=count_sessions_by_status(sessions, SessionStatus.ACTIVE),
                pending_sessions=count_sessions_by_status(sessions, SessionStatus.PENDING),
                archived_sessions=count_sessions_by_status(sessions, SessionStatus.ARCHIVED),
                waiting_customers=count_all_waiting_customers(sessions),
                revenue=revenue,
                clients=clients,
                average_revenue_per_client=safe_rate(revenue, clients),
            )
        )

    def _series(self, buckets: list[PeriodStats]) -> SeriesResponse:
        return SeriesResponse(
            buckets=[
                PeriodStatsResponse(
                    name=b.name, date=b.date, revenue=b.revenue, sessions=b.sessions, clients=b.clients
                )
                for b in buckets
            ],
            totals=_totals(buckets),
        )

    def _breakdown(self, items: list[BreakdownStats]) -> BreakdownListResponse:
        return BreakdownListResponse(
            items=[
                BreakdownResponse(
                    name=b.name, sessions=b.sessions, clients=b.clients, revenue=b.revenue, percentage=b.percentage
                )
                for b in items
            ],
            totals=_totals(items),
        )
