"""
Rider database model.

Riders apply through self-registration and are activated or rejected by an admin.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON
from sqlalchemy.sql import func
from parcel_backend.app.db.session import Base
from parcel_backend.app.models.enums import RiderStatus, enum_values


class Rider(Base):
    """Rider application; free-form application fields live in ``details``."""
    __tablename__ = "riders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    district = Column(String(100), nullable=True, index=True)

    status = Column(
        Enum(RiderStatus, values_callable=enum_values, native_enum=False, length=20),
        default=RiderStatus.PENDING,
        nullable=False,
        index=True,
    )

    details = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', status='{self.status.value}')>"
