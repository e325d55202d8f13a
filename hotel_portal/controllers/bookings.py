"""Booking history screen."""

from dataclasses import dataclass
from typing import Any, Optional, Union

from hotel_portal.controllers.base import LoadController
from hotel_portal.errors import GENERIC_MESSAGE
from hotel_portal.models import ActionKind, Booking, BookingAction
from hotel_portal.navigation import Redirect, Route
from hotel_portal.session import SessionManager
from hotel_portal.utils import calculate_nights

BOOKINGS_LOAD_FAILED_MESSAGE = "Failed to fetch your bookings. Please try again."


@dataclass(frozen=True)
class BookingRow:
    """A booking with everything its card needs."""

    booking: Booking
    status_label: str
    action: BookingAction
    nights: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.booking.id,
            "hotel": self.booking.hotel.name,
            "address": self.booking.hotel.address,
            "check_in_date": self.booking.check_in_date.isoformat(),
            "check_out_date": self.booking.check_out_date.isoformat(),
            "nights": self.nights,
            "status": self.status_label,
            "guests": [{"name": g.name, "age": g.age} for g in self.booking.guests],
            "action": {"label": self.action.label, "enabled": self.action.enabled},
        }


@dataclass(frozen=True)
class Notification:
    type: str
    message: str


class BookingListController(LoadController):
    """Lists the user's bookings with the one action each status allows."""

    fallback_message = BOOKINGS_LOAD_FAILED_MESSAGE
    unknown_error_message = GENERIC_MESSAGE

    def __init__(self, session: SessionManager, incoming_state: Optional[dict[str, Any]] = None):
        """Initialize the bookings screen.

        Args:
            session: Shared session manager
            incoming_state: State of the redirect that led here; a
                ``success`` flag turns its message into a notification
        """
        super().__init__(session)
        self.bookings: list[Booking] = []
        self.notification: Optional[Notification] = None
        if incoming_state and incoming_state.get("success"):
            self.notification = Notification("success", incoming_state.get("message") or "")

    async def fetch(self) -> list[Booking]:
        self.bookings = await self.session.authorized_request(self.session.api_client.list_bookings)
        return self.bookings

    @property
    def rows(self) -> list[BookingRow]:
        return [
            BookingRow(
                booking=booking,
                status_label=booking.status_label,
                action=booking.action,
                nights=calculate_nights(booking.check_in_date, booking.check_out_date),
            )
            for booking in self.bookings
        ]

    def dismiss_notification(self) -> None:
        self.notification = None

    def consume_notification(self) -> Optional[Notification]:
        """Return the pending notification once."""
        notification, self.notification = self.notification, None
        return notification

    def start_check_in(self, booking_id: Union[int, str]) -> Optional[Redirect]:
        """Redirect to web check-in, only for bookings whose action allows it."""
        for booking in self.bookings:
            if str(booking.id) == str(booking_id):
                if booking.action.kind is ActionKind.CHECK_IN:
                    return Redirect(Route.CHECKIN, params={"booking_id": booking.id})
                return None
        return None
