"""Screen controllers."""

from hotel_portal.controllers.auth import AuthController
from hotel_portal.controllers.base import (
    LoadController,
    Outcome,
    ScreenController,
    SubmissionController,
    SubmissionState,
)
from hotel_portal.controllers.booking import BookingController
from hotel_portal.controllers.bookings import BookingListController, BookingRow, Notification
from hotel_portal.controllers.checkin import CheckInController, GuestForm
from hotel_portal.controllers.hotels import ConfirmationController, HotelListController

__all__ = [
    "AuthController",
    "BookingController",
    "BookingListController",
    "BookingRow",
    "CheckInController",
    "ConfirmationController",
    "GuestForm",
    "HotelListController",
    "LoadController",
    "Notification",
    "Outcome",
    "ScreenController",
    "SubmissionController",
    "SubmissionState",
]
