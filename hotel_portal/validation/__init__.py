"""Form validation."""

from hotel_portal.validation.validators import (
    FieldErrors,
    guest_field_key,
    is_valid_aadhaar,
    is_valid_email,
    parse_age,
    validate_aadhaar,
    validate_age,
    validate_booking_form,
    validate_checkin_form,
    validate_credentials_form,
    validate_date_range,
    validate_email,
    validate_guest_name,
    validate_password,
)

__all__ = [
    "FieldErrors",
    "guest_field_key",
    "is_valid_aadhaar",
    "is_valid_email",
    "parse_age",
    "validate_aadhaar",
    "validate_age",
    "validate_booking_form",
    "validate_checkin_form",
    "validate_credentials_form",
    "validate_date_range",
    "validate_email",
    "validate_guest_name",
    "validate_password",
]
