"""
User Pydantic schemas.

Field aliases keep the camelCase profile keys the sign-in clients send.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from parcel_backend.app.models.enums import UserRole


class UserUpsert(BaseModel):
    """Schema for the sign-up / sign-in upsert keyed on email."""
    email: str = Field(..., min_length=1, max_length=255)
    display_name: Optional[str] = Field(None, alias="displayName")
    photo_url: Optional[str] = Field(None, alias="photoURL")
    last_sign_in_time: Optional[str] = Field(None, alias="lastSignInTime")
    role: Optional[UserRole] = Field(None, description="Only 'user' is accepted here")

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = Field(None, alias="displayName")
    photo_url: Optional[str] = Field(None, alias="photoURL")
    last_sign_in_time: Optional[str] = Field(None, alias="lastSignInTime")
    role: UserRole
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class UserRoleResponse(BaseModel):
    role: UserRole


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserRoleChangeResponse(BaseModel):
    message: str
    user: UserResponse
