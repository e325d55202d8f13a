"""Base classes for portal screen controllers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from structlog import get_logger

from hotel_portal.errors import (
    GENERIC_MESSAGE,
    APIError,
    AuthError,
    LoginRequired,
    UnknownError,
    ValidationError,
    normalize_error,
    user_message,
)
from hotel_portal.navigation import Redirect, Route
from hotel_portal.session import Session, SessionManager
from hotel_portal.validation import FieldErrors

logger = get_logger(__name__)


class SubmissionState(str, Enum):
    """Lifecycle of a single form submission."""
    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class Outcome:
    """Result of a load or submission, as the screen should render it."""

    state: SubmissionState
    field_errors: FieldErrors = field(default_factory=dict)
    general_error: Optional[str] = None
    redirect: Optional[Redirect] = None
    data: Any = None
    ignored: bool = False

    @property
    def success(self) -> bool:
        return self.state is SubmissionState.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "state": self.state.value,
            "ignored": self.ignored,
            "field_errors": dict(self.field_errors),
            "general_error": self.general_error,
            "redirect": self.redirect.to_dict() if self.redirect else None,
        }


class ScreenController(ABC):
    """Shared plumbing for every screen.

    Screens that need a session redirect to login as soon as the shared
    session is torn down, and turn API failures into one general message.
    """

    requires_auth = True
    fallback_message = GENERIC_MESSAGE
    unknown_error_message: Optional[str] = None
    include_error_details = False

    def __init__(self, session: SessionManager, name: Optional[str] = None):
        """Initialize the controller.

        Args:
            session: Shared session manager
            name: Optional custom name for logging. Defaults to class name.
        """
        self.session = session
        self.name = name or self.__class__.__name__
        self.logger = logger.bind(controller=self.name)
        self.general_error: Optional[str] = None
        self.redirect: Optional[Redirect] = None
        self._unsubscribe = session.subscribe(self._on_session_change)

    def _on_session_change(self, session: Session) -> None:
        if not self.requires_auth:
            return
        if not session.token:
            if self.redirect is None:
                self.redirect = Redirect(Route.AUTH)
        elif self.redirect is not None and self.redirect.route is Route.AUTH:
            self.redirect = None

    def close(self) -> None:
        """Stop listening to session changes."""
        self._unsubscribe()

    def _login_redirect(self) -> Redirect:
        self.redirect = Redirect(Route.AUTH)
        return self.redirect

    def _handle_failure(self, exc: Exception) -> APIError:
        """Turn a failed call into the screen's general error or a forced logout.

        Returns:
            The normalized error
        """
        error = normalize_error(exc)
        if isinstance(error, AuthError):
            self.redirect = self.session.handle_auth_failure()
            self.general_error = None
            return error

        if isinstance(error, UnknownError):
            self.logger.error("Unexpected failure", error=str(exc), exc_info=True)
        else:
            self.logger.warning(
                "Request failed",
                error_type=type(error).__name__,
                status_code=getattr(error, "status_code", None),
            )

        self.general_error = user_message(
            error,
            self.fallback_message,
            include_details=self.include_error_details,
            unknown_fallback=self.unknown_error_message,
        )
        return error


class LoadController(ScreenController):
    """Screen that fetches read-only data when it is shown."""

    def __init__(self, session: SessionManager, name: Optional[str] = None):
        super().__init__(session, name=name)
        self.loading = False

    @abstractmethod
    async def fetch(self) -> Any:
        """Fetch the screen's data and store it on the controller."""

    async def load(self) -> Outcome:
        """Load the screen data, converting failures into screen state."""
        if self.requires_auth and not self.session.token:
            return Outcome(SubmissionState.FAILED, redirect=self._login_redirect())

        self.loading = True
        self.general_error = None
        try:
            data = await self.fetch()
        except LoginRequired:
            return Outcome(SubmissionState.FAILED, redirect=self._login_redirect())
        except Exception as e:
            self._handle_failure(e)
            return Outcome(
                SubmissionState.FAILED,
                general_error=self.general_error,
                redirect=self.redirect,
            )
        finally:
            self.loading = False

        state = SubmissionState.FAILED if self.general_error else SubmissionState.SUCCESS
        return Outcome(state, general_error=self.general_error, redirect=self.redirect, data=data)


class SubmissionController(ScreenController):
    """Form controller issuing at most one request at a time.

    ``IDLE -> VALIDATING -> (INVALID -> IDLE) | (SUBMITTING -> SUCCESS | FAILED -> IDLE)``
    """

    def __init__(self, session: SessionManager, name: Optional[str] = None):
        super().__init__(session, name=name)
        self.state = SubmissionState.IDLE
        self.field_errors: FieldErrors = {}
        self._in_flight = False

    @property
    def can_submit(self) -> bool:
        """False while a submission is outstanding (submit button disabled)."""
        return not self._in_flight

    @abstractmethod
    def validate(self) -> FieldErrors:
        """Collect every field error of the form."""

    @abstractmethod
    async def send(self) -> Any:
        """Issue the single network request for this submission."""

    @abstractmethod
    def on_success(self, result: Any) -> Optional[Redirect]:
        """Where to go after a successful submission."""

    def blocked_reason(self) -> Optional[str]:
        """General error that forbids submitting right now, checked before any call."""
        return None

    def _check_form(self) -> None:
        errors = self.validate()
        if errors:
            raise ValidationError(errors)

    async def submit(self) -> Outcome:
        """Validate and submit the form.

        A call made while a previous submission is outstanding is ignored.
        """
        if self._in_flight:
            self.logger.debug("Submission already in flight, ignoring")
            return Outcome(self.state, ignored=True)

        # Set before the first await so a concurrent submit sees it
        self._in_flight = True
        try:
            self.state = SubmissionState.VALIDATING
            try:
                self._check_form()
            except ValidationError as e:
                self.field_errors = e.field_errors
                self.state = SubmissionState.IDLE
                return Outcome(SubmissionState.INVALID, field_errors=dict(self.field_errors))

            self.field_errors = {}
            self.general_error = None

            if self.requires_auth and not self.session.token:
                self.state = SubmissionState.IDLE
                return Outcome(SubmissionState.FAILED, redirect=self._login_redirect())

            reason = self.blocked_reason()
            if reason:
                self.general_error = reason
                self.state = SubmissionState.IDLE
                return Outcome(SubmissionState.FAILED, general_error=reason)

            self.state = SubmissionState.SUBMITTING
            try:
                result = await self.send()
            except LoginRequired:
                self.state = SubmissionState.IDLE
                return Outcome(SubmissionState.FAILED, redirect=self._login_redirect())
            except Exception as e:
                self._on_failure(e)
                self.state = SubmissionState.IDLE
                return Outcome(
                    SubmissionState.FAILED,
                    general_error=self.general_error,
                    redirect=self.redirect,
                )

            self.state = SubmissionState.SUCCESS
            self.redirect = self.on_success(result)
            return Outcome(SubmissionState.SUCCESS, redirect=self.redirect, data=result)
        finally:
            self._in_flight = False

    def _on_failure(self, exc: Exception) -> None:
        self._handle_failure(exc)
