"""Hotel booking API client."""

from typing import Any, Optional, TypeVar, Union

import httpx
import pydantic
from structlog import get_logger

from hotel_portal.config import settings
from hotel_portal.errors import (
    AuthError,
    BusinessError,
    UnknownError,
    extract_server_message,
    normalize_error,
)
from hotel_portal.models import (
    AuthResponse,
    Booking,
    BookingCreated,
    Hotel,
    User,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)
Identifier = Union[int, str]


class HotelBookingAPIClient:
    """Client for the hotel booking API endpoints.

    Every call is issued exactly once; failures are raised as the portal's
    error taxonomy and never retried.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the booking API client.

        Args:
            base_url: API root, defaults to settings
            timeout: Request timeout in seconds, defaults to settings
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api.request_timeout
        self.transport = transport

    def _get_headers(self, token: Optional[str] = None) -> dict[str, str]:
        """Get default headers for booking API requests.

        Args:
            token: Bearer token for authenticated calls

        Returns:
            Dictionary of HTTP headers
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": settings.api.user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        token: Optional[str] = None,
        booking_id: Optional[Identifier] = None,
    ) -> Any:
        """Make a single HTTP request to the booking API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path (without base URL)
            data: Request body data (for POST requests)
            params: Query parameters
            token: Bearer token; None for public endpoints
            booking_id: Booking being worked on, for log context

        Returns:
            Decoded JSON body, or an empty dict for empty bodies

        Raises:
            AuthError: If an authenticated call is rejected with 401
            BusinessError: If the API responds with any other non-success status
            TransportError: If no response was received
            UnknownError: If the request could not be sent or the body is unusable
        """
        url = f"{self.base_url}{endpoint}"
        headers = self._get_headers(token)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=data,
                    params=params,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = normalize_error(e, endpoint=endpoint)
            logger.error(
                "Booking API request failed without a response",
                booking_id=booking_id,
                endpoint=endpoint,
                method=method,
                error_type=type(error).__name__,
                error=str(e),
            )
            raise error from e

        # Authenticated call rejected: the session is no longer valid
        if response.status_code == 401 and token:
            logger.warning(
                "Booking API rejected bearer credential",
                booking_id=booking_id,
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise AuthError(f"Authentication failed for {endpoint}", endpoint=endpoint)

        if response.status_code >= 400:
            server_message, details = extract_server_message(self._safe_json(response))
            logger.error(
                "Booking API error response",
                booking_id=booking_id,
                endpoint=endpoint,
                status_code=response.status_code,
                server_message=server_message,
            )
            raise BusinessError(
                server_message or f"Request to {endpoint} failed with {response.status_code}",
                status_code=response.status_code,
                endpoint=endpoint,
                server_message=server_message,
                details=details,
            )

        if 200 <= response.status_code < 300:
            logger.debug(
                "Booking API request successful",
                booking_id=booking_id,
                endpoint=endpoint,
                method=method,
                status_code=response.status_code,
            )
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                raise UnknownError(
                    f"Invalid JSON in response from {endpoint}", endpoint=endpoint
                ) from e

        logger.error(
            "Unexpected booking API response status",
            booking_id=booking_id,
            endpoint=endpoint,
            status_code=response.status_code,
        )
        raise UnknownError(
            f"Unexpected response from {endpoint}: {response.status_code}",
            endpoint=endpoint,
        )

    @staticmethod
    def _safe_json(response: httpx.Response) -> Any:
        """Decode an error body, tolerating non-JSON payloads."""
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _parse(model: type[ModelT], payload: Any, endpoint: str) -> ModelT:
        """Validate a success body against a response model.

        Raises:
            UnknownError: If the body does not match the model
        """
        try:
            return model.model_validate(payload)
        except pydantic.ValidationError as e:
            logger.error(
                "Booking API response did not match model",
                endpoint=endpoint,
                model=model.__name__,
                error_count=e.error_count(),
            )
            raise UnknownError(f"Unexpected response shape from {endpoint}", endpoint=endpoint) from e

    @staticmethod
    def _unwrap_list(payload: Any, key: str) -> list[Any]:
        """Accept both a bare array and an object wrapping it under ``key``."""
        if isinstance(payload, dict):
            payload = payload.get(key, [])
        return payload if isinstance(payload, list) else []

    async def login(self, email: str, password: str) -> AuthResponse:
        """Exchange credentials for a bearer token.

        Args:
            email: Account email
            password: Account password

        Returns:
            AuthResponse with token and, when the API sends it, the user

        Raises:
            APIError: If the API request fails
        """
        logger.info("Logging in")
        response = await self._make_request(
            "POST", "/auth/login", data={"email": email, "password": password}
        )
        return self._parse(AuthResponse, response, "/auth/login")

    async def register(self, email: str, password: str) -> AuthResponse:
        """Create an account and receive a bearer token.

        Raises:
            APIError: If the API request fails
        """
        logger.info("Registering account")
        response = await self._make_request(
            "POST", "/auth/register", data={"email": email, "password": password}
        )
        return self._parse(AuthResponse, response, "/auth/register")

    async def get_profile(self, token: str) -> User:
        """Fetch the identity behind a token.

        Args:
            token: Bearer token

        Returns:
            The authenticated user

        Raises:
            APIError: If the API request fails
        """
        response = await self._make_request("GET", "/auth/profile", token=token)
        user_data = response.get("user", response) if isinstance(response, dict) else response
        return self._parse(User, user_data, "/auth/profile")

    async def list_hotels(self) -> list[Hotel]:
        """Fetch the hotel catalogue.

        Returns:
            List of hotels

        Raises:
            APIError: If the API request fails
        """
        logger.info("Fetching hotel list")
        response = await self._make_request("GET", "/hotels")
        hotels = [
            self._parse(Hotel, item, "/hotels")
            for item in self._unwrap_list(response, "hotels")
        ]
        logger.info("Successfully fetched hotels", hotel_count=len(hotels))
        return hotels

    async def get_hotel(self, hotel_id: Identifier) -> Optional[Hotel]:
        """Fetch a single hotel.

        Args:
            hotel_id: Hotel identifier

        Returns:
            The hotel, or None when the API returns an empty body

        Raises:
            APIError: If the API request fails
        """
        endpoint = f"/hotels/{hotel_id}"
        response = await self._make_request("GET", endpoint)
        if not response:
            return None
        return self._parse(Hotel, response, endpoint)

    async def book_hotel(
        self,
        token: str,
        hotel_id: Identifier,
        payload: dict[str, Any],
    ) -> BookingCreated:
        """Create a booking for the authenticated user.

        Args:
            token: Bearer token
            hotel_id: Hotel to book
            payload: Booking request body (checkInDate, checkOutDate, optional primaryGuestAadhaar)

        Returns:
            BookingCreated with the new booking reference

        Raises:
            APIError: If the API request fails
        """
        endpoint = f"/hotels/{hotel_id}/book"
        logger.info(
            "Creating booking",
            hotel_id=hotel_id,
            check_in_date=payload.get("checkInDate"),
            check_out_date=payload.get("checkOutDate"),
        )
        response = await self._make_request("POST", endpoint, data=payload, token=token)
        created = self._parse(BookingCreated, response, endpoint)
        logger.info("Booking created", booking_id=created.booking.id, hotel_id=hotel_id)
        return created

    async def list_bookings(self, token: str) -> list[Booking]:
        """Fetch the authenticated user's bookings.

        Raises:
            APIError: If the API request fails
        """
        response = await self._make_request("GET", "/bookings", token=token)
        bookings = [
            self._parse(Booking, item, "/bookings")
            for item in self._unwrap_list(response, "bookings")
        ]
        logger.info("Successfully fetched bookings", booking_count=len(bookings))
        return bookings

    async def get_checkin_booking(self, token: str, booking_id: Identifier) -> Optional[Booking]:
        """Fetch a booking for web check-in.

        Returns:
            The booking, or None when the API returns an empty body

        Raises:
            APIError: If the API request fails
        """
        endpoint = f"/checkin/booking/{booking_id}"
        response = await self._make_request("GET", endpoint, token=token, booking_id=booking_id)
        if not response:
            return None
        return self._parse(Booking, response, endpoint)

    async def submit_checkin(
        self,
        token: str,
        booking_id: Identifier,
        guests: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Submit the guest roster for a confirmed booking.

        Args:
            token: Bearer token
            booking_id: Booking to check in
            guests: Guests as ``{"name", "aadhaarNumber", "age"}`` dicts

        Returns:
            Raw API response

        Raises:
            APIError: If the API request fails
        """
        endpoint = f"/checkin/booking/{booking_id}"
        logger.info("Submitting web check-in", booking_id=booking_id, guest_count=len(guests))
        response = await self._make_request(
            "POST", endpoint, data={"guests": guests}, token=token, booking_id=booking_id
        )
        logger.info("Web check-in accepted", booking_id=booking_id)
        return response if isinstance(response, dict) else {"data": response}
