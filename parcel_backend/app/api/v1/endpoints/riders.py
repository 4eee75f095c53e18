"""
Rider API Endpoints.

Self-registration plus the admin review queue. Activating a rider promotes
the linked user to the rider role.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from parcel_backend.app.core.guards import require_admin
from parcel_backend.app.core.principal import Principal
from parcel_backend.app.db.session import get_db
from parcel_backend.app.domain.lifecycle.parcel_lifecycle import store_guard
from parcel_backend.app.domain.lifecycle.rider_lifecycle import RiderLifecycle
from parcel_backend.app.models.enums import RiderStatus
from parcel_backend.app.models.rider import Rider
from parcel_backend.app.schemas.rider import (
    RiderCreate, RiderResponse, RiderStatusUpdate, RiderStatusChangeResponse
)
from parcel_backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/riders", tags=["Riders"])


async def _list_riders(db: AsyncSession, *conditions) -> List[RiderResponse]:
    query = select(Rider).where(*conditions).order_by(Rider.created_at.desc(), Rider.id.desc())
    async with store_guard(db, "load riders"):
        result = await db.execute(query)
        riders = result.scalars().all()
    return [RiderResponse.from_model(r) for r in riders]


@router.get("", response_model=List[RiderResponse])
async def list_riders(db: AsyncSession = Depends(get_db)):
    return await _list_riders(db)


@router.post("", response_model=RiderResponse, status_code=status.HTTP_201_CREATED)
async def register_rider(
    rider_data: RiderCreate,
    db: AsyncSession = Depends(get_db)
):
    """Submit a rider application; it starts as pending."""
    rider = await RiderLifecycle.register(
        db,
        name=rider_data.name,
        email=rider_data.email,
        district=rider_data.district,
        details=rider_data.application_details(),
    )
    return RiderResponse.from_model(rider)


@router.get("/pending", response_model=List[RiderResponse])
async def pending_riders(
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await _list_riders(db, Rider.status == RiderStatus.PENDING)


@router.get("/active", response_model=List[RiderResponse])
async def active_riders(
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await _list_riders(db, Rider.status == RiderStatus.ACTIVE)


@router.get("/available", response_model=List[RiderResponse])
async def available_riders(
    district: str = Query(..., min_length=1, description="Delivery district"),
    db: AsyncSession = Depends(get_db)
):
    """Riders registered in a district, used when picking a rider to assign."""
    return await _list_riders(db, Rider.district == district)


@router.patch("/{rider_id}/status", response_model=RiderStatusChangeResponse)
async def update_rider_status(
    rider_id: int = Path(..., description="Rider ID"),
    status_update: RiderStatusUpdate = ...,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Change a rider's application status (admin only).

    On activation the user with ``email`` (or the rider's own email) becomes
    a rider; other statuses leave users untouched.
    """
    rider, role_updated = await RiderLifecycle.set_status(
        db, rider_id, status_update.status, user_email=status_update.email
    )

    await log_event(
        db=db,
        action=AuditAction.RIDER_STATUS_CHANGED,
        actor_email=admin.email,
        target=f"rider:{rider.id}",
        metadata={"status": rider.status.value, "user_role_updated": role_updated}
    )

    return RiderStatusChangeResponse(
        message=f"Rider status updated to {rider.status.value}",
        rider=RiderResponse.from_model(rider),
        user_role_updated=role_updated
    )
