"""
Payment API Endpoints.

Payment history, payment recording and card payment intents.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from parcel_backend.app.core.dependencies import get_federated_principal
from parcel_backend.app.core.exceptions import BadRequestError, PaymentProviderError, ServiceUnavailableError
from parcel_backend.app.core.guards import ensure_owner
from parcel_backend.app.core.principal import Principal
from parcel_backend.app.core.reliability import CircuitOpenError
from parcel_backend.app.db.session import get_db
from parcel_backend.app.domain.lifecycle.parcel_lifecycle import ParcelLifecycle, store_guard
from parcel_backend.app.models.payment import Payment
from parcel_backend.app.schemas.payment import (
    PaymentCreate, PaymentResponse, PaymentRecordedResponse,
    PaymentIntentRequest, PaymentIntentResponse
)
from parcel_backend.app.services.audit import log_event, AuditAction
from parcel_backend.app.services.container import get_payment_gateway
from parcel_backend.app.services.payment_gateway import PaymentGateway, PaymentGatewayError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Payments"])


@router.get("/payments", response_model=List[PaymentResponse])
async def payment_history(
    email: Optional[str] = Query(None, description="Payer email (must be the caller's)"),
    principal: Principal = Depends(get_federated_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    The caller's payments, most recent first.
    """
    if not email:
        raise BadRequestError("Email is required")
    ensure_owner(principal, email)

    query = (
        select(Payment)
        .where(Payment.email == email)
        .order_by(Payment.paid_at.desc(), Payment.id.desc())
    )
    async with store_guard(db, "fetch payments"):
        result = await db.execute(query)
        payments = result.scalars().all()

    return [PaymentResponse.model_validate(p) for p in payments]


@router.post("/payments", response_model=PaymentRecordedResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_data: PaymentCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Mark the parcel paid and append a payment record.
    """
    payment = await ParcelLifecycle.record_payment(
        db,
        parcel_id=payment_data.parcel_id,
        email=payment_data.email,
        amount=payment_data.amount,
        payment_method=payment_data.payment_method,
        transaction_id=payment_data.transaction_id,
    )

    await log_event(
        db=db,
        action=AuditAction.PAYMENT_RECORDED,
        actor_email=payment_data.email,
        target=f"parcel:{payment_data.parcel_id}",
        metadata={"payment_id": payment.id, "transaction_id": payment_data.transaction_id}
    )

    return PaymentRecordedResponse(inserted_id=payment.id)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    intent_request: PaymentIntentRequest,
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """
    Create a card payment intent and return its client secret.
    """
    try:
        client_secret = await gateway.create_payment_intent(intent_request.amount_in_cents)
    except CircuitOpenError:
        logger.warning("Payment gateway circuit is open; rejecting payment intent")
        raise ServiceUnavailableError("Payment gateway")
    except PaymentGatewayError as e:
        raise PaymentProviderError(str(e))

    return PaymentIntentResponse(client_secret=client_secret)
