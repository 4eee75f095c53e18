"""
Audit Log Database Model.

Tracks security-relevant events and lifecycle actions for compliance monitoring.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from parcel_backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking security events and lifecycle actions.

    Events logged:
    - LOGIN_SUCCESS / LOGIN_FAILED / LOGOUT
    - ROLE_CHANGED (for privilege escalation detection)
    - RIDER_ASSIGNED / PARCEL_STATUS_CHANGED / PARCEL_CASHED_OUT
    - PAYMENT_RECORDED / PARCEL_DELETED / RIDER_STATUS_CHANGED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for anonymous callers)
    actor_email = Column(String(255), index=True, nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # What the action was performed on, e.g. "parcel:12" or "user:a@b.com"
    target = Column(String(255), index=True, nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_email}, target={self.target})>"
