"""Field validators for the portal forms.

Each validator returns an error message, or None when the value is valid.
The ``validate_*_form`` helpers collect every field error of a form.
"""

import re
from datetime import date
from typing import Any, Optional, Sequence

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
AADHAAR_PATTERN = re.compile(r"^[0-9]{12}$")
AGE_PATTERN = re.compile(r"^\s*\+?[0-9]+\s*$")
MIN_PASSWORD_LENGTH = 6

FieldErrors = dict[str, str]


def is_valid_email(value: Optional[str]) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_aadhaar(value: Optional[str]) -> bool:
    """True iff the value is exactly 12 decimal digits. No checksum is verified."""
    return isinstance(value, str) and AADHAAR_PATTERN.fullmatch(value) is not None


def validate_email(value: Optional[str]) -> Optional[str]:
    if not value:
        return "Email is required"
    if not is_valid_email(value):
        return "Please enter a valid email"
    return None


def validate_password(value: Optional[str]) -> Optional[str]:
    if not value:
        return "Password is required"
    if len(value) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def validate_aadhaar(value: Optional[str], required: bool = True) -> Optional[str]:
    """Validate an Aadhaar number.

    Args:
        value: Raw field value; surrounding whitespace is ignored
        required: Whether an empty value is an error

    Returns:
        Error message or None
    """
    value = (value or "").strip()
    if not value:
        return "Aadhaar number is required" if required else None
    if not is_valid_aadhaar(value):
        return "Aadhaar number must be 12 digits"
    return None


def validate_guest_name(value: Optional[str]) -> Optional[str]:
    if not (value or "").strip():
        return "Name is required"
    return None


def parse_age(value: Any) -> Optional[int]:
    """Parse a guest age as a positive integer, or return None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if not isinstance(value, str) or not AGE_PATTERN.match(value):
        return None
    age = int(value)
    return age if age > 0 else None


def validate_age(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return "Age is required"
    if parse_age(value) is None:
        return "Age must be a positive number"
    return None


def validate_date_range(
    check_in: Optional[date],
    check_out: Optional[date],
    today: Optional[date] = None,
) -> FieldErrors:
    """Validate a stay.

    Check-in must not be before today; check-out must be strictly after
    check-in. Both dates are required.

    Args:
        check_in: Check-in date
        check_out: Check-out date
        today: Local date to compare against (defaults to date.today())

    Returns:
        Errors keyed by "check_in_date" / "check_out_date"
    """
    today = today or date.today()
    errors: FieldErrors = {}

    if check_in is None:
        errors["check_in_date"] = "Please select a check-in date"
    elif check_in < today:
        errors["check_in_date"] = "Check-in date cannot be in the past"

    if check_out is None:
        errors["check_out_date"] = "Please select a check-out date"
    elif check_in is not None and check_out <= check_in:
        errors["check_out_date"] = "Check-out date must be after check-in date"

    return errors


def validate_credentials_form(email: Optional[str], password: Optional[str]) -> FieldErrors:
    errors: FieldErrors = {}
    email_error = validate_email(email)
    if email_error:
        errors["email"] = email_error
    password_error = validate_password(password)
    if password_error:
        errors["password"] = password_error
    return errors


def validate_booking_form(
    check_in: Optional[date],
    check_out: Optional[date],
    primary_guest_aadhaar: Optional[str] = None,
    today: Optional[date] = None,
) -> FieldErrors:
    """Validate the booking form. The primary guest Aadhaar is optional."""
    errors = validate_date_range(check_in, check_out, today=today)
    aadhaar_error = validate_aadhaar(primary_guest_aadhaar, required=False)
    if aadhaar_error:
        errors["primary_guest_aadhaar"] = aadhaar_error
    return errors


def guest_field_key(index: int, field: str) -> str:
    return f"guests[{index}].{field}"


def validate_checkin_form(guests: Sequence[Any]) -> FieldErrors:
    """Validate every guest of a check-in roster.

    Args:
        guests: Objects with ``name``, ``aadhaar_number`` and ``age`` attributes

    Returns:
        Errors keyed by ``guests[i].<field>``
    """
    errors: FieldErrors = {}
    if not guests:
        errors["guests"] = "At least one guest is required"
        return errors

    for index, guest in enumerate(guests):
        checks = (
            ("name", validate_guest_name(guest.name)),
            ("aadhaar_number", validate_aadhaar(guest.aadhaar_number)),
            ("age", validate_age(guest.age)),
        )
        for field, message in checks:
            if message:
                errors[guest_field_key(index, field)] = message
    return errors
