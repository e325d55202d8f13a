"""API clients package."""

from hotel_portal.clients.booking_api_client import HotelBookingAPIClient

__all__ = ["HotelBookingAPIClient"]
