"""Web check-in screen: guest roster for a confirmed booking."""

from dataclasses import dataclass
from typing import Any, Optional, Union

from hotel_portal.controllers.base import LoadController, Outcome, SubmissionController
from hotel_portal.models import Booking, BookingStatus
from hotel_portal.navigation import Redirect, Route
from hotel_portal.session import SessionManager
from hotel_portal.validation import FieldErrors, guest_field_key, parse_age, validate_checkin_form

BOOKING_LOAD_FAILED_MESSAGE = "Failed to fetch booking details. Please try again later."
BOOKING_NOT_FOUND_MESSAGE = "Booking not found or you do not have permission to access it."
ALREADY_CHECKED_IN_MESSAGE = "This booking has already been checked in."
NOT_CONFIRMED_MESSAGE = "Only confirmed bookings can be checked in."
BOOKING_NOT_LOADED_MESSAGE = "Booking details are not loaded yet. Please try again."
CHECKIN_FAILED_MESSAGE = "Failed to complete check-in. Please try again."
CHECKIN_SUCCESS_MESSAGE = "Check-in completed successfully!"

GUEST_FIELDS = ("name", "aadhaar_number", "age")


@dataclass
class GuestForm:
    """One editable row of the roster. Values are kept as typed."""

    name: str = ""
    aadhaar_number: str = ""
    age: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name.strip(),
            "aadhaarNumber": self.aadhaar_number.strip(),
            "age": parse_age(self.age),
        }


def check_in_refusal(booking: Optional[Booking]) -> Optional[str]:
    """Why this booking cannot be checked in, or None when it is CONFIRMED."""
    if booking is None:
        return BOOKING_NOT_LOADED_MESSAGE
    if booking.booking_status is BookingStatus.CONFIRMED:
        return None
    if booking.booking_status is BookingStatus.CHECKED_IN:
        return ALREADY_CHECKED_IN_MESSAGE
    return NOT_CONFIRMED_MESSAGE


class _BookingLoader(LoadController):
    """Fetches the booking and refuses any that is not CONFIRMED."""

    fallback_message = BOOKING_LOAD_FAILED_MESSAGE

    def __init__(self, session: SessionManager, booking_id: Union[int, str]):
        super().__init__(session, name="CheckInController.load")
        self.booking_id = booking_id
        self.booking: Optional[Booking] = None

    async def fetch(self) -> Optional[Booking]:
        booking = await self.session.authorized_request(
            self.session.api_client.get_checkin_booking, self.booking_id
        )
        if booking is None:
            self.general_error = BOOKING_NOT_FOUND_MESSAGE
            return None
        refusal = check_in_refusal(booking)
        if refusal:
            self.general_error = refusal
            return None
        self.booking = booking
        return booking


class CheckInController(SubmissionController):
    """Edits the guest roster and submits it once."""

    fallback_message = CHECKIN_FAILED_MESSAGE

    def __init__(self, session: SessionManager, booking_id: Union[int, str]):
        super().__init__(session)
        self.booking_id = booking_id
        self.guests: list[GuestForm] = [GuestForm()]
        self._loader = _BookingLoader(session, booking_id)
        self.logger = self.logger.bind(booking_id=booking_id)

    @property
    def booking(self) -> Optional[Booking]:
        return self._loader.booking

    async def load(self) -> Outcome:
        """Fetch the booking to check in."""
        outcome = await self._loader.load()
        self.general_error = self._loader.general_error
        if outcome.redirect:
            self.redirect = outcome.redirect
        return outcome

    def close(self) -> None:
        self._loader.close()
        super().close()

    def add_guest(self) -> None:
        self.guests.append(GuestForm())

    def remove_guest(self, index: int) -> None:
        """Remove a guest row; the last remaining row and bad indices are ignored."""
        if len(self.guests) <= 1 or not 0 <= index < len(self.guests):
            return
        del self.guests[index]
        # Row indices shifted; stale per-guest errors would point at the wrong rows
        self.field_errors = {
            key: message for key, message in self.field_errors.items() if not key.startswith("guests[")
        }

    def update_guest(self, index: int, field: str, value: str) -> None:
        """Set a guest field and clear the error shown for it.

        Raises:
            ValueError: If ``field`` is not a guest field
        """
        if field not in GUEST_FIELDS:
            raise ValueError(f"Unknown guest field: {field}")
        setattr(self.guests[index], field, value)
        self.field_errors.pop(guest_field_key(index, field), None)

    def validate(self) -> FieldErrors:
        return validate_checkin_form(self.guests)

    def blocked_reason(self) -> Optional[str]:
        return check_in_refusal(self.booking)

    async def send(self) -> dict[str, Any]:
        return await self.session.authorized_request(
            self.session.api_client.submit_checkin,
            self.booking_id,
            [guest.to_payload() for guest in self.guests],
        )

    def on_success(self, result: dict[str, Any]) -> Redirect:
        return Redirect(
            Route.BOOKINGS,
            state={"success": True, "message": CHECKIN_SUCCESS_MESSAGE},
        )
