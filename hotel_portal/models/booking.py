"""Pydantic models for booking and check-in responses."""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from hotel_portal.models.status import (
    BookingAction,
    BookingStatus,
    BookingStatusMapper,
)


class Guest(BaseModel):
    """Guest registered on a booking."""

    id: Optional[Union[int, str]] = None
    name: str
    aadhaar_number: Optional[str] = Field(None, alias="aadhaarNumber")
    age: Optional[int] = None

    class Config:
        extra = "allow"
        populate_by_name = True


class BookingHotel(BaseModel):
    """Hotel summary embedded in a booking."""

    name: str
    address: str = ""

    class Config:
        extra = "allow"
        populate_by_name = True


class Booking(BaseModel):
    """Read-only booking view model, owned by the server."""

    id: Union[int, str]
    hotel: BookingHotel
    check_in_date: date = Field(alias="checkInDate")
    check_out_date: date = Field(alias="checkOutDate")
    status: str = ""
    guests: list[Guest] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def parse_stay_date(cls, v):
        """Accept full ISO timestamps and keep the date part."""
        if isinstance(v, str) and len(v) > 10 and v[4] == "-":
            return v[:10]
        return v

    @field_validator("guests", mode="before")
    @classmethod
    def default_guests(cls, v):
        """Treat a null roster as empty."""
        return v or []

    @property
    def booking_status(self) -> Optional[BookingStatus]:
        """Parsed status, None when the API sent something unrecognized."""
        return BookingStatus.parse(self.status)

    @property
    def action(self) -> BookingAction:
        """The single action available for this booking."""
        return BookingStatusMapper.action_for_status(self.status)

    @property
    def status_label(self) -> str:
        """Badge text for the booking status."""
        return BookingStatusMapper.status_label(self.status)

    class Config:
        extra = "allow"
        populate_by_name = True


class BookingReference(BaseModel):
    """Minimal booking record returned right after creation."""

    id: Union[int, str]
    status: Optional[str] = None

    class Config:
        extra = "allow"
        populate_by_name = True


class BookingCreated(BaseModel):
    """Response from the booking creation endpoint."""

    booking: BookingReference
    message: Optional[str] = None

    class Config:
        extra = "allow"
