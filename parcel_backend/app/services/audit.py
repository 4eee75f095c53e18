"""
Audit logging service for tracking security events and lifecycle actions.

Provides centralized logging for compliance and security monitoring.
"""

import logging
from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, desc
from parcel_backend.app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    ROLE_CHANGED = "ROLE_CHANGED"

    # Parcel lifecycle
    RIDER_ASSIGNED = "RIDER_ASSIGNED"
    PARCEL_STATUS_CHANGED = "PARCEL_STATUS_CHANGED"
    PARCEL_CASHED_OUT = "PARCEL_CASHED_OUT"
    PARCEL_DELETED = "PARCEL_DELETED"
    PAYMENT_RECORDED = "PAYMENT_RECORDED"

    # Riders
    RIDER_STATUS_CHANGED = "RIDER_STATUS_CHANGED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_email: Optional[str] = None,
    target: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> Optional[AuditLog]:
    """
    Log a security or lifecycle event to the audit log.

    The audited action has already been committed by the caller, so a failure
    to write the audit row is logged and swallowed rather than failing the
    request after the fact.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_email: Email of the principal performing the action
        target: Resource acted upon, e.g. "parcel:12"
        metadata: Additional context as JSON
        ip_address: IP address of the request

    Returns:
        Created AuditLog instance, or None if it could not be written
    """
    audit_log = AuditLog(
        actor_email=actor_email,
        action=action,
        target=target,
        meta_data=metadata,
        ip_address=ip_address
    )

    # Own session: a failed audit write must not roll back or expire the caller's objects
    async with AsyncSession(bind=db.bind, expire_on_commit=False) as audit_db:
        try:
            audit_db.add(audit_log)
            await audit_db.commit()
        except SQLAlchemyError:
            await audit_db.rollback()
            logger.exception("Failed to write audit log entry %s for %s", action, target)
            return None

    logger.info("audit %s actor=%s target=%s", action, actor_email, target)
    return audit_log


async def log_auth_event(
    db: AsyncSession,
    action: str,
    email: Optional[str],
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> Optional[AuditLog]:
    """
    Log an authentication event (login success/failure, logout).

    Args:
        db: Database session
        action: AuditAction.LOGIN_SUCCESS, LOGIN_FAILED or LOGOUT
        email: Email attempting to authenticate
        ip_address: IP address of the attempt
        metadata: Additional context (e.g., failure reason)
    """
    return await log_event(
        db=db,
        action=action,
        actor_email=email,
        target=f"user:{email}" if email else None,
        ip_address=ip_address,
        metadata=metadata
    )


async def get_audit_trail(
    db: AsyncSession,
    target: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering, most recent first.
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if target:
        query = query.where(AuditLog.target == target)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
