"""Session lifecycle: bearer token plus the identity it resolves to."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from structlog import get_logger

from hotel_portal.clients import HotelBookingAPIClient
from hotel_portal.errors import (
    SESSION_EXPIRED_MESSAGE,
    APIError,
    AuthError,
    LoginRequired,
    normalize_error,
    user_message,
)
from hotel_portal.models import User
from hotel_portal.navigation import Redirect, Route
from hotel_portal.storage import TokenStore

logger = get_logger(__name__)

RESTORE_FAILED_MESSAGE = "Session expired. Please login again."
LOGIN_FAILED_MESSAGE = "Login failed. Please check your credentials."
REGISTER_FAILED_MESSAGE = "Registration failed. Please try again."

Listener = Callable[["Session"], None]
T = TypeVar("T")


@dataclass(frozen=True)
class Session:
    """Snapshot of the session. Token and user are replaced together."""

    token: Optional[str] = None
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


class AuthFailed(Exception):
    """Raised by login/register with the message to show the user."""

    def __init__(self, message: str, cause: APIError):
        self.message = message
        self.cause = cause
        super().__init__(message)


class SessionManager:
    """Owns the bearer token and the identity derived from it.

    One instance is shared by every controller. State changes go through
    ``_commit`` which writes storage and memory in one synchronous step, then
    notifies subscribers so every mounted screen sees logout.
    """

    def __init__(self, api_client: HotelBookingAPIClient, token_store: TokenStore):
        self.api_client = api_client
        self.token_store = token_store
        self._session = Session()
        self._listeners: list[Listener] = []
        self.error: Optional[str] = None
        self.loading = False

    @property
    def session(self) -> Session:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def user(self) -> Optional[User]:
        return self._session.user

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked after every session change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_error(self) -> None:
        self.error = None

    def _commit(self, token: Optional[str], user: Optional[User]) -> None:
        """Replace the session and its persisted token together.

        Storage is written first; if that raises, memory is left untouched.
        """
        if token:
            self.token_store.set(token)
        else:
            self.token_store.delete()
        self._session = Session(token=token, user=user)

        for listener in list(self._listeners):
            listener(self._session)

    async def restore(self) -> bool:
        """Re-validate a persisted token on startup.

        Returns:
            True when the session is authenticated afterwards
        """
        token = self.token_store.get()
        if not token:
            self._commit(None, None)
            return False

        self.loading = True
        try:
            user = await self.api_client.get_profile(token)
        except Exception as e:
            logger.warning(
                "Failed to restore session, clearing token",
                error_type=type(normalize_error(e)).__name__,
            )
            self._commit(None, None)
            self.error = RESTORE_FAILED_MESSAGE
            return False
        finally:
            self.loading = False

        self._commit(token, user)
        self.error = None
        logger.info("Session restored", user_id=user.id)
        return True

    async def login(self, email: str, password: str) -> User:
        """Log in and start a session.

        Raises:
            AuthFailed: With the server message or a generic fallback; the
                session is left unchanged
        """
        return await self._authenticate("login", email, password, LOGIN_FAILED_MESSAGE)

    async def register(self, email: str, password: str) -> User:
        """Register an account and start a session.

        Raises:
            AuthFailed: With the server message or a generic fallback; the
                session is left unchanged
        """
        return await self._authenticate("register", email, password, REGISTER_FAILED_MESSAGE)

    async def _authenticate(
        self,
        action: str,
        email: str,
        password: str,
        fallback: str,
    ) -> User:
        self.loading = True
        self.error = None
        try:
            call = self.api_client.login if action == "login" else self.api_client.register
            auth = await call(email, password)
            user = auth.user
            if user is None:
                # Login responses carry only the token; resolve the identity before committing
                user = await self.api_client.get_profile(auth.token)
        except Exception as e:
            error = normalize_error(e)
            # A 401 here means bad credentials, not an expired session
            message = fallback if isinstance(error, AuthError) else user_message(error, fallback)
            logger.warning(
                "Authentication failed",
                action=action,
                error_type=type(error).__name__,
            )
            self.error = message
            raise AuthFailed(message, error) from e
        finally:
            self.loading = False

        self._commit(auth.token, user)
        logger.info("Authenticated", action=action, user_id=user.id)
        return user

    def logout(self) -> None:
        """End the session locally. No network call is made."""
        self._commit(None, None)
        logger.info("Logged out")

    def require_token(self) -> str:
        """Return the current token for an authenticated call.

        Raises:
            LoginRequired: If there is no token; no request must be made
        """
        token = self._session.token
        if not token:
            raise LoginRequired("Authentication required")
        return token

    async def authorized_request(self, call: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run an API call with the current token as its first argument.

        Raises:
            LoginRequired: If there is no token; ``call`` is not invoked
            APIError: Whatever the call raises, including AuthError
        """
        token = self.require_token()
        return await call(token, *args, **kwargs)

    def handle_auth_failure(self) -> Redirect:
        """Tear the session down after a 401 and point the user at login."""
        logger.warning("Authenticated call rejected, ending session")
        self.logout()
        return Redirect(Route.AUTH, state={"message": SESSION_EXPIRED_MESSAGE})
