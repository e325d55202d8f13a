"""Routes and redirects between portal screens."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Route(str, Enum):
    """Screens of the portal."""
    HOME = "/"
    AUTH = "/auth"
    HOTELS = "/hotels"
    BOOK = "/book/{hotel_id}"
    CHECKIN = "/checkin/{booking_id}"
    CONFIRMATION = "/confirmation"
    BOOKINGS = "/bookings"

    @property
    def is_protected(self) -> bool:
        """Whether the screen needs an authenticated session."""
        return self not in (Route.HOME, Route.AUTH)


@dataclass(frozen=True)
class Redirect:
    """Navigation requested by a controller, with optional state for the target."""

    route: Route
    params: dict[str, Any] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        """Concrete path with parameters filled in."""
        return self.route.value.format(**self.params)

    @property
    def message(self) -> Optional[str]:
        return self.state.get("message")

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "state": dict(self.state)}


def guard(route: Route, is_authenticated: bool) -> Optional[Redirect]:
    """Return the redirect needed before showing ``route``, if any.

    Args:
        route: Screen about to be shown
        is_authenticated: Whether the session holds an identity

    Returns:
        Redirect to follow instead, or None when the screen may be shown
    """
    if route is Route.HOME:
        return Redirect(Route.HOTELS) if is_authenticated else Redirect(Route.AUTH)
    if route.is_protected and not is_authenticated:
        return Redirect(Route.AUTH)
    return None
