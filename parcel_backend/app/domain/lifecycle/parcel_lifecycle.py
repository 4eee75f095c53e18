"""
Parcel Lifecycle (Domain Logic).

Owns every write to a parcel's delivery, payment and cashout state:

    pending → rider_assigned → in_transit → delivered | service_center_delivered
    unpaid → paid
    none → cashed_out (once, by the assigned rider, after delivery)

Status progress is not guarded against regression. Each operation commits
its own writes; the two-step payment recording is only atomic when
``transactional`` is enabled.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.clock import utcnow
from parcel_backend.app.core.config import settings
from parcel_backend.app.core.exceptions import (
    AlreadyCashedOutError,
    ConflictError,
    InsufficientPermissionsError,
    InternalStoreError,
    NotYetDeliveredError,
    ResourceNotFoundError,
)
from parcel_backend.app.models.parcel import Parcel
from parcel_backend.app.models.parcel_enums import (
    COMPLETED_DELIVERY_STATUSES,
    CashoutStatus,
    DeliveryStatus,
    PaymentStatus,
)
from parcel_backend.app.models.payment import Payment

logger = logging.getLogger(__name__)


@asynccontextmanager
async def store_guard(db: AsyncSession, operation: str):
    """Roll back and surface store failures as InternalStoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Store failure during %s: %s", operation, e)
        raise InternalStoreError(f"Failed to {operation}") from e


class ParcelLifecycle:

    @staticmethod
    async def get_parcel(db: AsyncSession, parcel_id: int) -> Parcel:
        result = await db.execute(select(Parcel).where(Parcel.id == parcel_id))
        parcel = result.scalar_one_or_none()
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id, message="Parcel not found")
        return parcel

    @staticmethod
    async def create(
        db: AsyncSession,
        created_by: Optional[str] = None,
        tracking_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Parcel:
        """Book a parcel: pending, unpaid, not cashed out."""
        parcel = Parcel(
            created_by=created_by,
            tracking_id=tracking_id,
            details=details or {},
            delivery_status=DeliveryStatus.PENDING,
            payment_status=PaymentStatus.UNPAID,
            cashout_status=CashoutStatus.NONE,
            created_at=utcnow(),
        )
        async with store_guard(db, "create parcel"):
            db.add(parcel)
            await db.commit()
            await db.refresh(parcel)
        return parcel

    @staticmethod
    async def assign_rider(
        db: AsyncSession,
        parcel_id: int,
        rider_id: int,
        rider_name: str,
        rider_email: str,
    ) -> Parcel:
        """
        Assign a rider to a parcel.

        Raises:
            ResourceNotFoundError if the parcel does not exist or the same
            rider is already assigned (the update would change nothing)
        """
        async with store_guard(db, "assign rider"):
            result = await db.execute(select(Parcel).where(Parcel.id == parcel_id))
            parcel = result.scalar_one_or_none()

            already_assigned = (
                parcel is not None
                and parcel.delivery_status == DeliveryStatus.RIDER_ASSIGNED
                and parcel.assigned_rider_id == rider_id
                and parcel.assigned_rider_email == rider_email
            )
            if parcel is None or already_assigned:
                raise ResourceNotFoundError(
                    "Parcel", parcel_id, message="Parcel not found or already assigned"
                )

            parcel.delivery_status = DeliveryStatus.RIDER_ASSIGNED
            parcel.assigned_rider_id = rider_id
            parcel.assigned_rider_name = rider_name
            parcel.assigned_rider_email = rider_email
            parcel.assigned_at = utcnow()

            await db.commit()
            await db.refresh(parcel)
        return parcel

    @staticmethod
    async def advance_status(db: AsyncSession, parcel_id: int, status: DeliveryStatus) -> Parcel:
        """
        Move a parcel to ``status``.

        Stamps picked_at on in_transit and delivered_at on delivered.

        Raises:
            ResourceNotFoundError if the parcel does not exist or already has
            ``status`` (the update would change nothing)
        """
        status = DeliveryStatus(status)
        async with store_guard(db, "update status"):
            parcel = await ParcelLifecycle.get_parcel(db, parcel_id)

            if parcel.delivery_status == status:
                raise ResourceNotFoundError(
                    "Parcel", parcel_id, message="Parcel not found or status already set"
                )

            parcel.delivery_status = status
            if status == DeliveryStatus.IN_TRANSIT:
                parcel.picked_at = utcnow()
            elif status == DeliveryStatus.DELIVERED:
                parcel.delivered_at = utcnow()

            await db.commit()
            await db.refresh(parcel)
        return parcel

    @staticmethod
    async def cashout(db: AsyncSession, parcel_id: int, rider_email: str) -> Parcel:
        """
        Record a rider's cashout for a delivered parcel.

        Checks, in order:
        1. Parcel exists (404)
        2. Caller is the assigned rider (403)
        3. Not already cashed out (AlreadyCashedOut)
        4. Parcel reached a delivered state (NotYetDelivered)
        """
        async with store_guard(db, "cash out parcel"):
            parcel = await ParcelLifecycle.get_parcel(db, parcel_id)

            if not rider_email or parcel.assigned_rider_email != rider_email:
                raise InsufficientPermissionsError("Forbidden: This parcel is not assigned to you")

            if parcel.cashout_status == CashoutStatus.CASHED_OUT:
                raise AlreadyCashedOutError(parcel_id)

            if parcel.delivery_status not in COMPLETED_DELIVERY_STATUSES:
                raise NotYetDeliveredError(parcel_id, parcel.delivery_status)

            parcel.cashout_status = CashoutStatus.CASHED_OUT
            parcel.cashed_out_at = utcnow()

            await db.commit()
            await db.refresh(parcel)
        return parcel

    @staticmethod
    async def _insert_payment(
        db: AsyncSession,
        parcel_id: int,
        email: Optional[str],
        amount: Optional[float],
        payment_method: Optional[str],
        transaction_id: Optional[str],
    ) -> Payment:
        payment = Payment(
            parcel_id=parcel_id,
            email=email,
            amount=amount,
            payment_method=payment_method,
            transaction_id=transaction_id,
            paid_at=utcnow(),
        )
        db.add(payment)
        await db.flush()
        return payment

    @staticmethod
    async def record_payment(
        db: AsyncSession,
        parcel_id: int,
        email: Optional[str] = None,
        amount: Optional[float] = None,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
        transactional: Optional[bool] = None,
    ) -> Payment:
        """
        Mark a parcel paid, then append its Payment record.

        Non-transactional (default): the parcel update is committed before the
        payment insert, so a failed insert leaves a paid parcel without a
        Payment. Transactional: both writes commit together or not at all.

        Raises:
            ResourceNotFoundError if the parcel does not exist
            ConflictError if the parcel is already paid
        """
        if transactional is None:
            transactional = settings.transactional_writes

        async with store_guard(db, "record payment"):
            parcel = await ParcelLifecycle.get_parcel(db, parcel_id)

            if parcel.payment_status == PaymentStatus.PAID:
                raise ConflictError(
                    "Parcel already paid",
                    error_code="ERR_PAYMENT_001",
                    details={"parcel_id": parcel_id},
                )

            parcel.payment_status = PaymentStatus.PAID
            if not transactional:
                await db.commit()

            payment = await ParcelLifecycle._insert_payment(
                db, parcel_id, email, amount, payment_method, transaction_id
            )
            await db.commit()
            await db.refresh(payment)
        return payment

    @staticmethod
    async def delete(db: AsyncSession, parcel_id: int) -> None:
        async with store_guard(db, "delete parcel"):
            parcel = await ParcelLifecycle.get_parcel(db, parcel_id)
            await db.delete(parcel)
            await db.commit()
