import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

from hotel_portal.app import PortalApp
from hotel_portal.clients import HotelBookingAPIClient
from hotel_portal.config import Settings, configure_logging
from hotel_portal.session import SessionManager
from hotel_portal.storage import MemoryTokenStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE_URL = "http://api.test/api"
TOKEN = "tok-abc123"


def load_fixture(filename):
    """Helper to load a fixture file."""
    with open(FIXTURES_DIR / filename) as f:
        return json.load(f)


class FakeBookingAPI:
    """In-process stand-in for the booking API, served through httpx.MockTransport.

    Routes map (method, path) to a static JSON reply or a handler. Handlers may
    be coroutines, which lets a test hold a request open.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        handler: Optional[Callable[[httpx.Request], Any]] = None,
    ) -> None:
        key = (method.upper(), f"/api{path}")
        self.routes[key] = handler or (status, json)

    def handle(self, request: httpx.Request):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Route not found"})
        if callable(route):
            return route(request)
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and r.url.path == f"/api{path}"
        ]


@pytest.fixture(scope="session", autouse=True)
def structured_logging():
    """Route structlog through stdlib logging on stderr, as the CLI does."""
    configure_logging()


@pytest.fixture
def fake_api():
    """Fake booking API with no routes."""
    return FakeBookingAPI()


@pytest.fixture
def api_client(fake_api):
    return HotelBookingAPIClient(base_url=BASE_URL, timeout=5, transport=fake_api.transport)


@pytest.fixture
def token_store():
    return MemoryTokenStore()


@pytest.fixture
def session(api_client, token_store):
    return SessionManager(api_client, token_store)


@pytest.fixture
def profile_response():
    """Load profile response from fixture."""
    return load_fixture("booking_api/profile_response.json")


@pytest.fixture
def hotels_response():
    """Load hotel list response from fixture."""
    return load_fixture("booking_api/hotels_response.json")


@pytest.fixture
def bookings_response():
    """Load booking list response from fixture."""
    return load_fixture("booking_api/bookings_response.json")


@pytest.fixture
def checkin_booking_response():
    """Load check-in booking response from fixture."""
    return load_fixture("booking_api/checkin_booking_response.json")


@pytest_asyncio.fixture
async def logged_in_session(session, fake_api, profile_response):
    """Session restored from a persisted token whose profile fetch succeeds."""
    fake_api.add("GET", "/auth/profile", json=profile_response)
    session.token_store.set(TOKEN)
    assert await session.restore() is True
    return session


@pytest.fixture
def portal_app(fake_api, token_store):
    """Portal app wired to the fake API and an in-memory token store."""
    config = Settings(api_url=BASE_URL)
    return PortalApp(config=config, token_store=token_store, transport=fake_api.transport)
