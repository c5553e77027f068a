"""
authgate shared data models.

These models define the structure of the data exchanged over HTTP.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..users import UserIdentity

# Request Models (API Input)


class LoginRequest(BaseModel):
    """Username/password login."""

    username: str = Field(..., description="Account name", min_length=1, max_length=150)
    password: str = Field(..., description="Account password", max_length=1024)


# Response Models (API Output)


class TokenResponse(BaseModel):
    """Response after a successful login."""

    token: str = Field(..., description="Signed token to present on protected requests")


class UserResponse(BaseModel):
    """Public view of a user. Never carries a password."""

    id: int
    username: str

    @classmethod
    def from_identity(cls, identity: UserIdentity) -> "UserResponse":
        return cls(id=identity.id, username=identity.username)


class ErrorResponse(BaseModel):
    """Error body returned on rejected requests."""

    error: str
    status: int


class HealthResponse(BaseModel):
    """Liveness report."""

    status: str
    modules: str
    audit: str
    version: Optional[str] = None
