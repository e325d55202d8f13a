"""Booking screen: hotel detail plus the stay form."""

from datetime import date
from typing import Any, Callable, Optional, Union

from hotel_portal.controllers.base import LoadController, Outcome, SubmissionController
from hotel_portal.models import BookingCreated, Hotel
from hotel_portal.navigation import Redirect, Route
from hotel_portal.session import SessionManager
from hotel_portal.utils import calculate_nights, format_date
from hotel_portal.validation import FieldErrors, is_valid_aadhaar, validate_booking_form

HOTEL_LOAD_FAILED_MESSAGE = "Failed to fetch hotel details. Please try again later."
HOTEL_NOT_FOUND_MESSAGE = "Hotel not found. Please go back and select another hotel."
BOOKING_FAILED_MESSAGE = "Failed to book hotel. Please try again."
BOOKING_SUCCESS_MESSAGE = "Hotel booked successfully!"


class _HotelLoader(LoadController):
    """Fetches the hotel shown above the booking form."""

    fallback_message = HOTEL_LOAD_FAILED_MESSAGE

    def __init__(self, session: SessionManager, hotel_id: Union[int, str]):
        super().__init__(session, name="BookingController.load")
        self.hotel_id = hotel_id
        self.hotel: Optional[Hotel] = None

    async def fetch(self) -> Optional[Hotel]:
        self.hotel = await self.session.api_client.get_hotel(self.hotel_id)
        if self.hotel is None:
            self.general_error = HOTEL_NOT_FOUND_MESSAGE
        return self.hotel


class BookingController(SubmissionController):
    """Collects stay dates and an optional primary guest Aadhaar, then books."""

    fallback_message = BOOKING_FAILED_MESSAGE
    include_error_details = True

    def __init__(
        self,
        session: SessionManager,
        hotel_id: Union[int, str],
        today: Callable[[], date] = date.today,
    ):
        """Initialize the booking screen.

        Args:
            session: Shared session manager
            hotel_id: Hotel being booked
            today: Returns the local date; check-in may not precede it
        """
        super().__init__(session)
        self.hotel_id = hotel_id
        self.today = today
        self.check_in_date: Optional[date] = None
        self.check_out_date: Optional[date] = None
        self.primary_guest_aadhaar = ""
        self._loader = _HotelLoader(session, hotel_id)

    @property
    def hotel(self) -> Optional[Hotel]:
        return self._loader.hotel

    @property
    def nights(self) -> int:
        return calculate_nights(self.check_in_date, self.check_out_date)

    async def load(self) -> Outcome:
        """Fetch the hotel being booked."""
        outcome = await self._loader.load()
        self.general_error = self._loader.general_error
        if outcome.redirect:
            self.redirect = outcome.redirect
        return outcome

    def close(self) -> None:
        self._loader.close()
        super().close()

    def validate(self) -> FieldErrors:
        return validate_booking_form(
            self.check_in_date,
            self.check_out_date,
            self.primary_guest_aadhaar,
            today=self.today(),
        )

    def build_payload(self) -> dict[str, Any]:
        """Request body; the Aadhaar is sent only when present and valid."""
        payload = {
            "checkInDate": format_date(self.check_in_date),
            "checkOutDate": format_date(self.check_out_date),
        }
        aadhaar = (self.primary_guest_aadhaar or "").strip()
        if aadhaar and is_valid_aadhaar(aadhaar):
            payload["primaryGuestAadhaar"] = aadhaar
        return payload

    async def send(self) -> BookingCreated:
        return await self.session.authorized_request(
            self.session.api_client.book_hotel,
            self.hotel_id,
            self.build_payload(),
        )

    def on_success(self, result: BookingCreated) -> Redirect:
        return Redirect(
            Route.BOOKINGS,
            state={
                "success": True,
                "message": BOOKING_SUCCESS_MESSAGE,
                "booking_id": result.booking.id,
            },
        )
