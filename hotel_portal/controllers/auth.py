"""Login and registration screen."""

from typing import Any, Literal, Optional

from hotel_portal.controllers.base import SubmissionController
from hotel_portal.navigation import Redirect, Route
from hotel_portal.session import AuthFailed, SessionManager
from hotel_portal.session.session_manager import LOGIN_FAILED_MESSAGE, REGISTER_FAILED_MESSAGE
from hotel_portal.validation import FieldErrors, validate_credentials_form

AuthTab = Literal["login", "register"]


class AuthController(SubmissionController):
    """Email/password form with a login and a register tab."""

    requires_auth = False

    def __init__(
        self,
        session: SessionManager,
        tab: AuthTab = "login",
        notice: Optional[str] = None,
    ):
        """Initialize the auth screen.

        Args:
            session: Shared session manager
            tab: Initially selected tab
            notice: Message carried by the redirect that led here
                (e.g., session expired)
        """
        super().__init__(session)
        self.tab: AuthTab = tab
        self.email = ""
        self.password = ""
        self.notice = notice or session.error

    @property
    def fallback_message(self) -> str:
        return LOGIN_FAILED_MESSAGE if self.tab == "login" else REGISTER_FAILED_MESSAGE

    def switch_tab(self, tab: AuthTab) -> None:
        """Change tab, clearing field, general and session errors."""
        self.tab = tab
        self.field_errors = {}
        self.general_error = None
        self.notice = None
        self.session.clear_error()

    def validate(self) -> FieldErrors:
        return validate_credentials_form(self.email, self.password)

    async def send(self) -> Any:
        if self.tab == "login":
            return await self.session.login(self.email, self.password)
        return await self.session.register(self.email, self.password)

    def on_success(self, result: Any) -> Redirect:
        self.logger.info("Authentication successful", tab=self.tab)
        return Redirect(Route.HOTELS)

    def _on_failure(self, exc: Exception) -> None:
        if isinstance(exc, AuthFailed):
            self.general_error = exc.message
            return
        self._handle_failure(exc)
