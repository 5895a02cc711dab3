"""
API Routers - Organized endpoint handlers for the Booking API.

Each router handles a specific domain:
- sessions: Sessions grid, dashboard list and session mutations
- catalog: Activities and spots
- bookings: Customer bookings per month, registration and cancellation
- statistics: Revenue series and per-activity / per-spot breakdowns
"""
