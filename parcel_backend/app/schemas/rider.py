"""
Rider Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from parcel_backend.app.models.enums import RiderStatus
from parcel_backend.app.models.rider import Rider

RESERVED_RIDER_KEYS = frozenset({"id", "_id", "status", "created_at", "updated_at"})


class RiderCreate(BaseModel):
    """Rider application; extra fields (phone, bike, NID, ...) are kept as submitted."""
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    district: Optional[str] = Field(None, max_length=100)

    class Config:
        extra = "allow"

    def application_details(self):
        return {k: v for k, v in (self.model_extra or {}).items() if k not in RESERVED_RIDER_KEYS}


class RiderStatusUpdate(BaseModel):
    status: RiderStatus
    email: Optional[str] = Field(None, description="User to promote on activation; defaults to the rider's email")


class RiderResponse(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    district: Optional[str] = None
    status: RiderStatus
    created_at: datetime

    class Config:
        extra = "allow"

    @classmethod
    def from_model(cls, rider: Rider) -> "RiderResponse":
        data = {k: v for k, v in (rider.details or {}).items() if k not in RESERVED_RIDER_KEYS}
        data.update(
            id=rider.id,
            name=rider.name,
            email=rider.email,
            district=rider.district,
            status=rider.status,
            created_at=rider.created_at,
        )
        return cls.model_validate(data)


class RiderStatusChangeResponse(BaseModel):
    message: str
    rider: RiderResponse
    user_role_updated: bool = False
