"""
Tracking API Endpoints.

Public append-only status history keyed by tracking id.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from parcel_backend.app.db.session import get_db
from parcel_backend.app.domain.tracking.tracking_log import TrackingLog
from parcel_backend.app.schemas.tracking import TrackingEventCreate, TrackingEventResponse

router = APIRouter(prefix="/trackings", tags=["Tracking"])


@router.get("/{tracking_id}", response_model=List[TrackingEventResponse])
async def get_tracking_history(
    tracking_id: str = Path(..., description="Tracking ID"),
    db: AsyncSession = Depends(get_db)
):
    """All updates for a tracking id, oldest first."""
    events = await TrackingLog.history(db, tracking_id)
    return [TrackingEventResponse.from_model(e) for e in events]


@router.post("", response_model=TrackingEventResponse, status_code=status.HTTP_201_CREATED)
async def add_tracking_update(
    event: TrackingEventCreate,
    db: AsyncSession = Depends(get_db)
):
    """Append a tracking update; the server stamps the timestamp."""
    created = await TrackingLog.record(
        db,
        tracking_id=event.tracking_id,
        status=event.status,
        details=event.event_details(),
    )
    return TrackingEventResponse.from_model(created)
