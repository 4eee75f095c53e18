"""
Parcel Pydantic schemas.

Defines request and response models for the parcel lifecycle. Booking
payloads are open-ended: unknown keys are kept and echoed back.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, Optional
from parcel_backend.app.models.parcel import Parcel
from parcel_backend.app.models.parcel_enums import DeliveryStatus, PaymentStatus, CashoutStatus

# Keys owned by the lifecycle; callers cannot smuggle them in through the booking payload
RESERVED_PARCEL_KEYS = frozenset({
    "id", "_id", "delivery_status", "payment_status", "cashout_status",
    "assigned_rider_id", "assigned_rider_email", "assigned_rider_name",
    "createdAt", "created_at", "assigned_at", "picked_at", "delivered_at", "cashed_out_at",
})


class ParcelCreate(BaseModel):
    """Schema for booking a new parcel."""
    created_by: Optional[str] = Field(None, max_length=255, description="Sender email")
    tracking_id: Optional[str] = Field(None, max_length=100)

    class Config:
        extra = "allow"

    def booking_details(self) -> Dict[str, Any]:
        return {k: v for k, v in (self.model_extra or {}).items() if k not in RESERVED_PARCEL_KEYS}


class RiderAssignment(BaseModel):
    rider_id: int = Field(..., alias="riderId")
    rider_name: str = Field(..., min_length=1, alias="riderName")
    rider_email: str = Field(..., min_length=1, alias="riderEmail")

    class Config:
        populate_by_name = True


class ParcelStatusUpdate(BaseModel):
    status: DeliveryStatus


class ParcelResponse(BaseModel):
    """Schema for parcel response: lifecycle columns merged over booking details."""
    id: int
    created_by: Optional[str] = None
    tracking_id: Optional[str] = None
    delivery_status: DeliveryStatus
    payment_status: PaymentStatus
    cashout_status: CashoutStatus
    assigned_rider_id: Optional[int] = None
    assigned_rider_email: Optional[str] = None
    assigned_rider_name: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")
    assigned_at: Optional[datetime] = None
    picked_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cashed_out_at: Optional[datetime] = None

    class Config:
        extra = "allow"
        populate_by_name = True

    @classmethod
    def from_model(cls, parcel: Parcel) -> "ParcelResponse":
        data = {k: v for k, v in (parcel.details or {}).items() if k not in RESERVED_PARCEL_KEYS}
        data.update(
            id=parcel.id,
            created_by=parcel.created_by,
            tracking_id=parcel.tracking_id,
            delivery_status=parcel.delivery_status,
            payment_status=parcel.payment_status,
            cashout_status=parcel.cashout_status,
            assigned_rider_id=parcel.assigned_rider_id,
            assigned_rider_email=parcel.assigned_rider_email,
            assigned_rider_name=parcel.assigned_rider_name,
            created_at=parcel.created_at,
            assigned_at=parcel.assigned_at,
            picked_at=parcel.picked_at,
            delivered_at=parcel.delivered_at,
            cashed_out_at=parcel.cashed_out_at,
        )
        return cls.model_validate(data)


class ParcelActionResponse(BaseModel):
    message: str
    parcel: ParcelResponse


class DeliveryStatusCount(BaseModel):
    status: DeliveryStatus
    count: int
