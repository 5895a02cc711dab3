"""
API Services - Business logic for the Booking API.

Services turn a client's cached sessions into the view models returned by
the routers.
"""

from .dashboard_service import DashboardService

__all__ = ["DashboardService"]
