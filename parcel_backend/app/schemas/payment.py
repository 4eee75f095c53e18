"""
Payment Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class PaymentCreate(BaseModel):
    """Schema for recording a completed payment."""
    parcel_id: int = Field(..., alias="parcelId")
    email: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    transaction_id: Optional[str] = Field(None, alias="transactionId")

    class Config:
        populate_by_name = True


class PaymentResponse(BaseModel):
    id: int
    parcel_id: int = Field(..., alias="parcelId")
    email: Optional[str] = None
    amount: Optional[float] = None
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    transaction_id: Optional[str] = Field(None, alias="transactionId")
    paid_at: datetime

    class Config:
        from_attributes = True
        populate_by_name = True


class PaymentRecordedResponse(BaseModel):
    message: str = "Payment recorded and parcel marked as paid"
    inserted_id: int = Field(..., alias="insertedId")

    class Config:
        populate_by_name = True


class PaymentIntentRequest(BaseModel):
    amount_in_cents: int = Field(..., gt=0, alias="amountInCents")

    class Config:
        populate_by_name = True


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(..., alias="clientSecret")

    class Config:
        populate_by_name = True
