"""Hotel list and confirmation screens."""

from typing import Any, Optional, Union

from hotel_portal.controllers.base import LoadController
from hotel_portal.models import Hotel
from hotel_portal.navigation import Redirect, Route
from hotel_portal.session import SessionManager

HOTELS_LOAD_FAILED_MESSAGE = "Failed to fetch hotels. Please try again later."
DEFAULT_CONFIRMATION_MESSAGE = "Your request has been processed successfully."


class HotelListController(LoadController):
    """Hotel catalogue with a Book Now action per hotel."""

    fallback_message = HOTELS_LOAD_FAILED_MESSAGE

    def __init__(self, session: SessionManager):
        super().__init__(session)
        self.hotels: list[Hotel] = []

    async def fetch(self) -> list[Hotel]:
        self.hotels = await self.session.api_client.list_hotels()
        return self.hotels

    def book(self, hotel_id: Union[int, str]) -> Redirect:
        return Redirect(Route.BOOK, params={"hotel_id": hotel_id})


class ConfirmationController:
    """Confirmation shown after a redirect carrying ``success``."""

    def __init__(self, incoming_state: Optional[dict[str, Any]] = None):
        state = incoming_state or {}
        self.success = bool(state.get("success"))
        self.message = state.get("message") or DEFAULT_CONFIRMATION_MESSAGE
        self.booking_id = state.get("booking_id")

    @property
    def redirect(self) -> Optional[Redirect]:
        """Without a success state there is nothing to confirm."""
        if not self.success:
            return Redirect(Route.BOOKINGS)
        return None

    def view_bookings(self) -> Redirect:
        return Redirect(Route.BOOKINGS)

    def book_another(self) -> Redirect:
        return Redirect(Route.HOTELS)
