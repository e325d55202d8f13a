"""Booking API response models."""

from hotel_portal.models.booking import (
    Booking,
    BookingCreated,
    BookingHotel,
    BookingReference,
    Guest,
)
from hotel_portal.models.hotel import Hotel
from hotel_portal.models.status import (
    ActionKind,
    BookingAction,
    BookingStatus,
    BookingStatusMapper,
)
from hotel_portal.models.user import AuthResponse, User

__all__ = [
    "ActionKind",
    "AuthResponse",
    "Booking",
    "BookingAction",
    "BookingCreated",
    "BookingHotel",
    "BookingReference",
    "BookingStatus",
    "BookingStatusMapper",
    "Guest",
    "Hotel",
    "User",
]
