"""
API Module - Black Box Interface

Purpose: HTTP request and response models
Interface: Pydantic models used by the FastAPI application
Hidden: Field validation rules

The API layer only orchestrates - it contains no authentication logic.
"""

from .models import ErrorResponse, HealthResponse, LoginRequest, TokenResponse, UserResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
]
