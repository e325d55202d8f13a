"""Pydantic models for authentication responses."""

from typing import Optional, Union

from pydantic import BaseModel, Field


class User(BaseModel):
    """Identity record returned by the profile endpoint."""

    id: Union[int, str]
    email: str
    name: Optional[str] = None

    class Config:
        extra = "allow"
        populate_by_name = True


class AuthResponse(BaseModel):
    """Login/registration response.

    Login responses may omit ``user``; the session completes the identity
    with a profile fetch in that case.
    """

    token: str = Field(min_length=1)
    user: Optional[User] = None
    message: Optional[str] = None

    class Config:
        extra = "allow"
        populate_by_name = True

