"""
Tracking event database model.

Append-only log of status updates keyed by a caller-chosen tracking id.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from parcel_backend.app.db.session import Base


class TrackingEvent(Base):
    __tablename__ = "tracking_events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    tracking_id = Column(String(100), nullable=False, index=True)
    status = Column(String(100), nullable=False)
    details = Column(JSON, nullable=False, default=dict)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<TrackingEvent(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status}')>"
