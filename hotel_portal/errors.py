"""Error taxonomy for the booking portal.

Every failure a screen can see is one of:

- ``ValidationError``: local, field-scoped, never reaches the network
- ``AuthError``: 401 from an authenticated call, forces logout
- ``BusinessError``: the server answered with a non-success status
- ``TransportError``: the request went out but no response came back
- ``UnknownError``: anything else, including requests that could not be sent

``LoginRequired`` is raised before an authenticated call is attempted
without a token.
"""

from typing import Any, Optional

import httpx

CONNECTIVITY_MESSAGE = "No response from server. Please check your internet connection."
GENERIC_MESSAGE = "An unexpected error occurred. Please try again."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


class PortalError(Exception):
    """Base exception for the booking portal."""

    pass


class ValidationError(PortalError):
    """Raised when a form fails local validation."""

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__(", ".join(sorted(self.field_errors)))


class LoginRequired(PortalError):
    """Raised when an authenticated call is attempted without a token."""

    pass


class APIError(PortalError):
    """Base exception for booking API failures."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        self.message = message
        self.endpoint = endpoint
        super().__init__(message)


class AuthError(APIError):
    """Raised when the API rejects the bearer credential (401)."""

    status_code = 401


class BusinessError(APIError):
    """Raised when the API responds with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: Optional[str] = None,
        server_message: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, endpoint=endpoint)
        self.status_code = status_code
        self.server_message = server_message
        self.details = details


class TransportError(APIError):
    """Raised when a request was sent but no response arrived."""

    pass


class UnknownError(APIError):
    """Raised for failures that fit no other category."""

    pass


def extract_server_message(payload: Any) -> tuple[Optional[str], Optional[str]]:
    """Pull ``message`` and ``details`` out of an error body.

    Args:
        payload: Decoded JSON body, or anything else

    Returns:
        Tuple of (message, details), each None when absent or blank
    """
    if not isinstance(payload, dict):
        return None, None

    message = payload.get("message")
    details = payload.get("details")
    message = message.strip() if isinstance(message, str) and message.strip() else None
    details = details.strip() if isinstance(details, str) and details.strip() else None
    return message, details


def normalize_error(error: BaseException, endpoint: Optional[str] = None) -> APIError:
    """Convert any exception raised around an API call into the taxonomy.

    Args:
        error: The exception that was raised
        endpoint: Endpoint being called, for context

    Returns:
        An AuthError, BusinessError, TransportError or UnknownError
    """
    if isinstance(error, APIError):
        return error

    # Request left the client but nothing usable came back
    if isinstance(
        error,
        (
            httpx.TimeoutException,
            httpx.NetworkError,
            httpx.RemoteProtocolError,
            httpx.ProxyError,
        ),
    ):
        return TransportError(CONNECTIVITY_MESSAGE, endpoint=endpoint)

    return UnknownError(str(error) or error.__class__.__name__, endpoint=endpoint)


def user_message(
    error: APIError,
    fallback: str,
    include_details: bool = False,
    unknown_fallback: Optional[str] = None,
) -> str:
    """Single user-facing message for a normalized API error.

    Args:
        error: Normalized API error
        fallback: Message used when the server said nothing useful
        include_details: Append the server's details in parentheses
        unknown_fallback: Message for UnknownError, defaults to ``fallback``

    Returns:
        Message to show in place of the form's general error
    """
    if isinstance(error, AuthError):
        return SESSION_EXPIRED_MESSAGE
    if isinstance(error, BusinessError):
        if not error.server_message:
            return fallback
        if include_details and error.details:
            return f"{error.server_message} ({error.details})"
        return error.server_message
    if isinstance(error, TransportError):
        return CONNECTIVITY_MESSAGE
    return unknown_fallback or fallback
