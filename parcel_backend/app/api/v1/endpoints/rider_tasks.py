"""
Rider Task API Endpoints.

Riders see the parcels assigned to them: open deliveries and completed ones.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from parcel_backend.app.core.exceptions import BadRequestError
from parcel_backend.app.core.guards import require_rider, ensure_owner
from parcel_backend.app.core.principal import Principal
from parcel_backend.app.db.session import get_db
from parcel_backend.app.domain.lifecycle.parcel_lifecycle import store_guard
from parcel_backend.app.models.parcel import Parcel
from parcel_backend.app.models.parcel_enums import COMPLETED_DELIVERY_STATUSES, OPEN_DELIVERY_STATUSES
from parcel_backend.app.schemas.parcel import ParcelResponse

router = APIRouter(prefix="/rider", tags=["Rider - Tasks"])


async def _rider_parcels(db: AsyncSession, rider_email: str, statuses) -> List[Parcel]:
    query = (
        select(Parcel)
        .where(Parcel.assigned_rider_email == rider_email, Parcel.delivery_status.in_(statuses))
        .order_by(Parcel.created_at.desc(), Parcel.id.desc())
    )
    async with store_guard(db, "get rider tasks"):
        result = await db.execute(query)
        return list(result.scalars().all())


def _require_own_email(rider: Principal, email: Optional[str]) -> str:
    if not email:
        raise BadRequestError("Rider email is required")
    ensure_owner(rider, email)
    return email


@router.get("/parcels", response_model=List[ParcelResponse])
async def pending_deliveries(
    email: Optional[str] = Query(None, description="Rider email (must be the caller's)"),
    rider: Principal = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """Parcels assigned to the calling rider that are not yet delivered."""
    rider_email = _require_own_email(rider, email)
    parcels = await _rider_parcels(db, rider_email, OPEN_DELIVERY_STATUSES)
    return [ParcelResponse.from_model(p) for p in parcels]


@router.get("/completed-parcels", response_model=List[ParcelResponse])
async def completed_deliveries(
    email: Optional[str] = Query(None, description="Rider email (must be the caller's)"),
    rider: Principal = Depends(require_rider),
    db: AsyncSession = Depends(get_db)
):
    """Parcels the calling rider has delivered, cashed out or not."""
    rider_email = _require_own_email(rider, email)
    parcels = await _rider_parcels(db, rider_email, COMPLETED_DELIVERY_STATUSES)
    return [ParcelResponse.from_model(p) for p in parcels]
