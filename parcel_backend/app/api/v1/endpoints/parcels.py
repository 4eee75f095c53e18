"""
Parcel API Endpoints.

Booking and browsing are public; assignment and deletion are admin-only,
status progress needs a federated principal, and cashout is restricted to
the assigned rider.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from parcel_backend.app.core.dependencies import get_federated_principal
from parcel_backend.app.core.guards import require_admin, require_rider
from parcel_backend.app.core.principal import Principal
from parcel_backend.app.db.session import get_db
from parcel_backend.app.domain.lifecycle.parcel_lifecycle import ParcelLifecycle, store_guard
from parcel_backend.app.models.parcel import Parcel
from parcel_backend.app.models.parcel_enums import DeliveryStatus, PaymentStatus
from parcel_backend.app.schemas.auth import MessageResponse
from parcel_backend.app.schemas.parcel import (
    ParcelCreate, ParcelResponse, ParcelActionResponse, ParcelStatusUpdate,
    RiderAssignment, DeliveryStatusCount
)
from parcel_backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/parcels", tags=["Parcels"])


@router.get("", response_model=List[ParcelResponse])
async def list_parcels(
    email: Optional[str] = Query(None, description="Sender email (created_by)"),
    payment_status: Optional[PaymentStatus] = Query(None),
    delivery_status: Optional[DeliveryStatus] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """
    List parcels, newest first, optionally filtered by sender and status.
    """
    query = select(Parcel)
    if email:
        query = query.where(Parcel.created_by == email)
    if payment_status:
        query = query.where(Parcel.payment_status == payment_status)
    if delivery_status:
        query = query.where(Parcel.delivery_status == delivery_status)
    query = query.order_by(Parcel.created_at.desc(), Parcel.id.desc())

    async with store_guard(db, "get parcels"):
        result = await db.execute(query)
        parcels = result.scalars().all()

    return [ParcelResponse.from_model(p) for p in parcels]


@router.get("/delivery/status-count", response_model=List[DeliveryStatusCount])
async def delivery_status_counts(db: AsyncSession = Depends(get_db)):
    """
    Number of parcels per delivery status (dashboard widget).

    Statuses with no parcels are omitted.
    """
    query = (
        select(Parcel.delivery_status, func.count(Parcel.id))
        .group_by(Parcel.delivery_status)
        .order_by(Parcel.delivery_status)
    )
    async with store_guard(db, "get delivery status counts"):
        result = await db.execute(query)
        rows = result.all()

    return [DeliveryStatusCount(status=row[0], count=row[1]) for row in rows]


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    db: AsyncSession = Depends(get_db)
):
    parcel = await ParcelLifecycle.get_parcel(db, parcel_id)
    return ParcelResponse.from_model(parcel)


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Book a new parcel.

    The lifecycle fields are always initialised server-side
    (pending / unpaid), whatever the payload says.
    """
    parcel = await ParcelLifecycle.create(
        db,
        created_by=parcel_data.created_by,
        tracking_id=parcel_data.tracking_id,
        details=parcel_data.booking_details(),
    )
    return ParcelResponse.from_model(parcel)


@router.patch("/{parcel_id}/assign", response_model=ParcelActionResponse)
async def assign_rider(
    parcel_id: int = Path(..., description="Parcel ID"),
    assignment: RiderAssignment = ...,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Assign a rider to a parcel (admin only).
    """
    parcel = await ParcelLifecycle.assign_rider(
        db,
        parcel_id,
        rider_id=assignment.rider_id,
        rider_name=assignment.rider_name,
        rider_email=assignment.rider_email,
    )

    await log_event(
        db=db,
        action=AuditAction.RIDER_ASSIGNED,
        actor_email=admin.email,
        target=f"parcel:{parcel.id}",
        metadata={"rider_id": assignment.rider_id, "rider_email": assignment.rider_email}
    )

    return ParcelActionResponse(message="Rider assigned successfully", parcel=ParcelResponse.from_model(parcel))


@router.patch("/{parcel_id}/status", response_model=ParcelActionResponse)
async def update_delivery_status(
    parcel_id: int = Path(..., description="Parcel ID"),
    status_update: ParcelStatusUpdate = ...,
    principal: Principal = Depends(get_federated_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    Move a parcel to a new delivery status (any authenticated principal).

    Only the known delivery statuses are accepted; ordering is not enforced.
    """
    parcel = await ParcelLifecycle.advance_status(db, parcel_id, status_update.status)

    await log_event(
        db=db,
        action=AuditAction.PARCEL_STATUS_CHANGED,
        actor_email=principal.email,
        target=f"parcel:{parcel.id}",
        metadata={"status": status_update.status.value}
    )

    return ParcelActionResponse(
        message=f"Parcel status updated to {status_update.status.value}",
        parcel=ParcelResponse.from_model(parcel)
    )


@router.patch("/{parcel_id}/cashout", response_model=ParcelActionResponse)
async def cashout_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    rider: Principal = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """
    Cash out a delivered parcel (assigned rider only, once).
    """
    parcel = await ParcelLifecycle.cashout(db, parcel_id, rider.email)

    await log_event(
        db=db,
        action=AuditAction.PARCEL_CASHED_OUT,
        actor_email=rider.email,
        target=f"parcel:{parcel.id}"
    )

    return ParcelActionResponse(message="Cashout successful", parcel=ParcelResponse.from_model(parcel))


@router.delete("/{parcel_id}", response_model=MessageResponse)
async def delete_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await ParcelLifecycle.delete(db, parcel_id)

    await log_event(
        db=db,
        action=AuditAction.PARCEL_DELETED,
        actor_email=admin.email,
        target=f"parcel:{parcel_id}"
    )

    return MessageResponse(message="Parcel deleted")
