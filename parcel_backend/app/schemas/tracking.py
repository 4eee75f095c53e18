"""
Tracking event Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from parcel_backend.app.models.tracking_event import TrackingEvent

RESERVED_TRACKING_KEYS = frozenset({"id", "_id", "timestamp"})


class TrackingEventCreate(BaseModel):
    """A status update; any extra fields (location, note, updated_by, ...) are kept."""
    tracking_id: str = Field(..., min_length=1, max_length=100)
    status: str = Field(..., min_length=1, max_length=100)

    class Config:
        extra = "allow"

    def event_details(self):
        return {k: v for k, v in (self.model_extra or {}).items() if k not in RESERVED_TRACKING_KEYS}


class TrackingEventResponse(BaseModel):
    id: int
    tracking_id: str
    status: str
    timestamp: datetime

    class Config:
        extra = "allow"

    @classmethod
    def from_model(cls, event: TrackingEvent) -> "TrackingEventResponse":
        data = {k: v for k, v in (event.details or {}).items() if k not in RESERVED_TRACKING_KEYS}
        data.update(
            id=event.id,
            tracking_id=event.tracking_id,
            status=event.status,
            timestamp=event.timestamp,
        )
        return cls.model_validate(data)
