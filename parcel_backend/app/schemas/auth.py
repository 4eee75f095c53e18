"""
Authentication Pydantic schemas.

Defines request and response schemas for the session login endpoints.
"""

from pydantic import BaseModel, Field
from parcel_backend.app.models.enums import UserRole


class LoginRequest(BaseModel):
    """
    Schema for session login.

    Used by POST /login. Only the email is checked.
    """
    email: str = Field(..., min_length=1, description="Registered email address")


class SessionUser(BaseModel):
    email: str
    role: UserRole


class LoginResponse(BaseModel):
    """Returned by a successful login alongside the session cookie."""
    message: str = "Login successful"
    user: SessionUser


class MessageResponse(BaseModel):
    message: str
