"""
Tracking Log (Domain Logic).

Append-only status history keyed by a caller-chosen tracking id. It is an
audit trail for senders and is never reconciled with a parcel's own status.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.clock import utcnow
from parcel_backend.app.core.exceptions import BadRequestError
from parcel_backend.app.domain.lifecycle.parcel_lifecycle import store_guard
from parcel_backend.app.models.tracking_event import TrackingEvent


class TrackingLog:

    @staticmethod
    async def record(
        db: AsyncSession,
        tracking_id: str,
        status: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> TrackingEvent:
        """Append an event stamped with server time."""
        if not tracking_id or not status:
            raise BadRequestError("tracking_id and status are required.")

        event = TrackingEvent(
            tracking_id=tracking_id,
            status=status,
            details=details or {},
            timestamp=utcnow(),
        )
        async with store_guard(db, "add tracking update"):
            db.add(event)
            await db.commit()
            await db.refresh(event)
        return event

    @staticmethod
    async def history(db: AsyncSession, tracking_id: str) -> List[TrackingEvent]:
        """Full history for ``tracking_id``, oldest first."""
        async with store_guard(db, "retrieve tracking information"):
            result = await db.execute(
                select(TrackingEvent)
                .where(TrackingEvent.tracking_id == tracking_id)
                .order_by(TrackingEvent.timestamp.asc(), TrackingEvent.id.asc())
            )
            return list(result.scalars().all())
