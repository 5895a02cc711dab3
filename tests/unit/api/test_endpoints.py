"""Endpoint tests for the Booking API with an in-memory gateway."""

from __future__ import annotations

from collections.abc import Generator
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from booking.models import CustomerStatus, SessionStatus
from booking.store import StoreRegistry


@pytest.fixture
def client(gateway, make_session, make_activity, make_spot, make_booking) -> Generator[TestClient, None, None]:
    """TestClient whose gateway and store registry are in-memory."""
    from api.dependencies import get_gateway, get_store_registry
    from api.main import app

    soon = datetime.now().replace(microsecond=0) + timedelta(days=2)
    gateway.activities["act-1"] = make_activity()
    gateway.spots["spot-1"] = make_spot()
    gateway.sessions["ses-1"] = make_session("ses-1", date=soon, places_max=4, places_reserved=1)
    gateway.sessions["ses-2"] = make_session("ses-2", date=soon + timedelta(days=1), status=SessionStatus.PENDING)
    gateway.sessions["ses-old"] = make_session("ses-old", date=soon - timedelta(days=400), status=SessionStatus.ARCHIVED)
    gateway.customer_sessions["cs-1"] = make_booking(
        "cs-1", "ses-1", price_total=40.0, status=CustomerStatus.WAITING, email="lea@example.org"
    )

    registry = StoreRegistry(gateway)
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_store_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSessionsEndpoints:
    def test_list_defaults_to_active_sessions(self, client: TestClient) -> None:
        response = client.get("/api/sessions")

        assert response.status_code == 200
        data = response.json()
        assert [s["id"] for s in data["items"]] == ["ses-1"]
        assert data["page_size"] == 6
        assert data["total_pages"] == 1
        assert data["waiting_customers"] == 1
        assert data["pending_sessions"] == 1

    def test_list_all_statuses_on_mobile(self, client: TestClient) -> None:
        response = client.get("/api/sessions", params={"status": "all", "device": "mobile"})

        data = response.json()
        assert data["page_size"] == 3
        assert [s["id"] for s in data["items"]] == ["ses-old", "ses-1", "ses-2"]
        assert data["pagination"] == [0]

    def test_search_matches_customer_email(self, client: TestClient) -> None:
        response = client.get("/api/sessions", params={"status": "all", "search": "LEA@"})

        assert [s["id"] for s in response.json()["items"]] == ["ses-1"]

    def test_invalid_period_is_rejected(self, client: TestClient) -> None:
        response = client.get("/api/sessions", params={"period": "nextYear"})

        assert response.status_code == 422

    def test_upcoming_excludes_archived(self, client: TestClient) -> None:
        response = client.get("/api/sessions/upcoming")

        assert [s["id"] for s in response.json()["sessions"]] == ["ses-1", "ses-2"]

    def test_get_session_with_details(self, client: TestClient) -> None:
        response = client.get("/api/sessions/ses-1")

        assert response.status_code == 200
        data = response.json()
        assert data["activity"]["name"] == "Paddle"
        assert data["customer_sessions"][0]["id"] == "cs-1"
        assert data["date"].endswith("Z")

    def test_unknown_session_is_404(self, client: TestClient) -> None:
        assert client.get("/api/sessions/nope").status_code == 404

    def test_create_update_delete_session(self, client: TestClient) -> None:
        body = {"date": "2030-01-10T09:00:00", "places_max": 5, "activity": "act-1", "spot": "spot-1"}

        created = client.post("/api/sessions", json=body)
        assert created.status_code == 201
        session_id = created.json()["id"]

        updated = client.put(f"/api/sessions/{session_id}", json={**body, "places_max": 7})
        assert updated.json()["places_max"] == 7

        deleted = client.delete(f"/api/sessions/{session_id}")
        assert deleted.json() == {"id": session_id, "status": "deleted"}
        assert client.get(f"/api/sessions/{session_id}").status_code == 404

    def test_gateway_failure_is_502(self, client: TestClient, gateway) -> None:
        gateway.failing.add("fetch_sessions")

        assert client.get("/api/sessions").status_code == 502


class TestCatalogEndpoints:
    def test_list_and_create_activities(self, client: TestClient) -> None:
        created = client.post("/api/activities", json={"name": "Escalade"})
        assert created.status_code == 201

        names = [a["name"] for a in client.get("/api/activities").json()]
        assert "Escalade" in names

    def test_update_missing_spot_is_404(self, client: TestClient) -> None:
        response = client.put("/api/spots/spot-9", json={"name": "Gorges"})

        assert response.status_code == 404


class TestBookingsEndpoints:
    def test_bookings_page_groups_months_with_bookings(self, client: TestClient) -> None:
        response = client.get("/api/bookings")

        assert response.status_code == 200
        data = response.json()
        assert len(data["months"]) == 1
        assert [s["id"] for s in data["months"][0]["sessions"]][0] == "ses-1"
        assert len(data["periods"]) == 4
        assert data["page_size"] == 3

    def test_register_cancel_and_capacity(self, client: TestClient, gateway) -> None:
        payload = {"last_name": "Durand", "number_of_people": 2, "type_person": "adult"}

        created = client.post("/api/bookings/ses-1", json=payload)
        assert created.status_code == 201
        assert gateway.sessions["ses-1"].places_reserved == 3

        refused = client.post("/api/bookings/ses-1", json=payload)
        assert refused.status_code == 409

        cancelled = client.post(f"/api/bookings/{created.json()['id']}/cancel")
        assert cancelled.json()["status"] == "Canceled"
        assert gateway.sessions["ses-1"].places_reserved == 1

    def test_delete_booking(self, client: TestClient, gateway) -> None:
        response = client.delete("/api/bookings/cs-1")

        assert response.status_code == 200
        assert "cs-1" not in gateway.customer_sessions


class TestStatisticsEndpoints:
    def test_monthly_series_has_twelve_buckets(self, client: TestClient) -> None:
        data = client.get("/api/statistics/monthly", params={"forecast": True}).json()

        assert len(data["buckets"]) == 12
        assert data["totals"]["sessions"] >= 1

    def test_daily_series_has_thirty_one_buckets(self, client: TestClient) -> None:
        data = client.get("/api/statistics/daily").json()

        assert len(data["buckets"]) == 31

    def test_activity_breakdown_excludes_archived(self, client: TestClient) -> None:
        data = client.get("/api/statistics/activities").json()

        assert data["items"][0]["name"] == "Paddle"
        assert data["items"][0]["sessions"] == 2
        assert data["totals"]["revenue"] == 40.0

    def test_summary(self, client: TestClient) -> None:
        data = client.get("/api/statistics/summary").json()

        assert data["total_sessions"] == 3
        assert data["archived_sessions"] == 1
        assert data["waiting_customers"] == 1
        assert data["average_revenue_per_client"] == 40.0


class TestClientSessions:
    def test_cache_is_per_client_and_dropped_on_logout(self, client: TestClient, gateway) -> None:
        client.get("/api/sessions", headers={"X-Client-Session": "tab-1"})
        client.get("/api/sessions", headers={"X-Client-Session": "tab-1"})
        client.get("/api/sessions", headers={"X-Client-Session": "tab-2"})
        assert gateway.calls["fetch_sessions"] == 2

        response = client.delete("/api/cache", headers={"X-Client-Session": "tab-1"})
        assert response.json() == {"status": "cleared", "client_session": "tab-1"}

        client.get("/api/sessions", headers={"X-Client-Session": "tab-1"})
        assert gateway.calls["fetch_sessions"] == 3


class TestAppFactory:
    def test_create_app_applies_configured_timezone(self) -> None:
        from api.main import create_app
        from api.settings import get_settings
        from booking.localtime import local_timezone

        create_app()

        assert str(local_timezone()) == get_settings().tz
