"""Composition root: builds the shared session and the screens that use it."""

from typing import Any, Optional, Union

import httpx
from structlog import get_logger

from hotel_portal.clients import HotelBookingAPIClient
from hotel_portal.config import Settings, settings as default_settings
from hotel_portal.controllers import (
    AuthController,
    BookingController,
    BookingListController,
    CheckInController,
    ConfirmationController,
    HotelListController,
)
from hotel_portal.navigation import Redirect, Route, guard
from hotel_portal.session import SessionManager
from hotel_portal.storage import TokenStore, build_token_store

logger = get_logger(__name__)


class PortalApp:
    """Owns the one session every screen shares and hands it to each screen."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        token_store: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Wire settings, token store, API client and session.

        Args:
            config: Settings; defaults to the global settings
            token_store: Token store; defaults to the one selected by settings
            transport: Optional httpx transport for the API client
        """
        self.config = config or default_settings
        self.token_store = token_store or build_token_store(self.config)
        self.api_client = HotelBookingAPIClient(
            base_url=self.config.api_base_url,
            timeout=self.config.api.request_timeout,
            transport=transport,
        )
        self.session = SessionManager(self.api_client, self.token_store)

    async def start(self) -> bool:
        """Restore the persisted session, as on app load."""
        restored = await self.session.restore()
        logger.info("Portal started", authenticated=restored, environment=self.config.environment)
        return restored

    def guard(self, route: Route) -> Optional[Redirect]:
        return guard(route, self.session.is_authenticated)

    def auth_screen(self, tab: str = "login", notice: Optional[str] = None) -> AuthController:
        return AuthController(self.session, tab=tab, notice=notice)

    def hotels_screen(self) -> HotelListController:
        return HotelListController(self.session)

    def booking_screen(self, hotel_id: Union[int, str]) -> BookingController:
        return BookingController(self.session, hotel_id)

    def bookings_screen(self, incoming_state: Optional[dict[str, Any]] = None) -> BookingListController:
        return BookingListController(self.session, incoming_state=incoming_state)

    def checkin_screen(self, booking_id: Union[int, str]) -> CheckInController:
        return CheckInController(self.session, booking_id)

    def confirmation_screen(self, incoming_state: Optional[dict[str, Any]] = None) -> ConfirmationController:
        return ConfirmationController(incoming_state)

    def logout(self) -> Redirect:
        self.session.logout()
        return Redirect(Route.AUTH)
