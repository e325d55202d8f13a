"""Formatting helpers shared by the controllers and CLI."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """Coerce a date, datetime or ISO string (YYYY-MM-DD...) to a date.

    Raises:
        ValueError: If a string is not an ISO date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def format_date(value: Optional[DateLike]) -> Optional[str]:
    """Format a date as YYYY-MM-DD, or None when absent."""
    parsed = to_date(value)
    return parsed.isoformat() if parsed else None


def calculate_nights(check_in: Optional[DateLike], check_out: Optional[DateLike]) -> int:
    """Number of nights between two dates, 0 when either is missing."""
    start, end = to_date(check_in), to_date(check_out)
    if not start or not end:
        return 0
    return abs((end - start).days)


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_price(amount: Union[int, float, Decimal]) -> str:
    """Format an amount in Indian Rupees without decimals (e.g., ₹1,23,457)."""
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}₹{_group_indian(str(abs(int(rounded))))}"
