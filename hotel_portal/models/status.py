"""Booking status and the action each status allows."""

from enum import Enum
from typing import NamedTuple, Optional


class BookingStatus(str, Enum):
    """Server-owned booking lifecycle states.

    - PENDING: awaiting confirmation, nothing to do yet
    - CONFIRMED: eligible for web check-in
    - CHECKED_IN: web check-in done
    - CANCELLED: terminal
    """
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["BookingStatus"]:
        """Parse a raw status string.

        Args:
            raw: Status as sent by the API (e.g., "CONFIRMED")

        Returns:
            Matching status, or None for missing/unrecognized values
        """
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class ActionKind(str, Enum):
    """What a booking row offers the user."""
    CHECK_IN = "check_in"
    CHECKED_IN = "checked_in"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CANCELLED = "cancelled"
    UNAVAILABLE = "unavailable"


class BookingAction(NamedTuple):
    """The single action rendered for a booking."""
    kind: ActionKind
    label: str
    enabled: bool


UNAVAILABLE_ACTION = BookingAction(ActionKind.UNAVAILABLE, "Unavailable", False)


class BookingStatusMapper:
    """Maps booking statuses to the action and badge shown for them."""

    ACTIONS = {
        BookingStatus.CONFIRMED: BookingAction(ActionKind.CHECK_IN, "Web Check-in", True),
        BookingStatus.CHECKED_IN: BookingAction(ActionKind.CHECKED_IN, "Already Checked In", False),
        BookingStatus.PENDING: BookingAction(
            ActionKind.AWAITING_CONFIRMATION, "Awaiting Confirmation", False
        ),
        BookingStatus.CANCELLED: BookingAction(ActionKind.CANCELLED, "Booking Cancelled", False),
    }

    @staticmethod
    def action_for_status(raw_status: Optional[str]) -> BookingAction:
        """Return the one action available for a booking status.

        Only CONFIRMED yields an enabled action. Unknown statuses fall back
        to a disabled, neutral action.

        Args:
            raw_status: Status string from the API

        Returns:
            BookingAction for the status
        """
        status = BookingStatus.parse(raw_status)
        if status is None:
            return UNAVAILABLE_ACTION
        return BookingStatusMapper.ACTIONS[status]

    @staticmethod
    def status_label(raw_status: Optional[str]) -> str:
        """Human-readable badge text (e.g., "CHECKED_IN" -> "Checked in").

        Args:
            raw_status: Status string from the API

        Returns:
            Badge label, "Unknown" when the status is missing
        """
        if not isinstance(raw_status, str) or not raw_status.strip():
            return "Unknown"
        value = raw_status.strip()
        return value[0].upper() + value[1:].lower().replace("_", " ")
