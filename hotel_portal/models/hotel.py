"""Pydantic models for hotel listing responses."""

from typing import Optional, Union

from pydantic import BaseModel

from hotel_portal.utils import format_price


class Hotel(BaseModel):
    """Hotel record from the listing and detail endpoints."""

    id: Union[int, str]
    name: str
    address: str = ""
    description: Optional[str] = None
    price: Optional[float] = None

    class Config:
        extra = "allow"
        populate_by_name = True

    @property
    def price_label(self) -> Optional[str]:
        """Nightly price in rupees, e.g. ₹12,500."""
        return format_price(self.price) if self.price is not None else None
