"""
Rider Lifecycle (Domain Logic).

Admins move rider applications between statuses. Activation also promotes
the linked user to the ``rider`` role; that second write is best effort and
only shares a transaction with the status change when ``transactional``
is enabled.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_backend.app.core.config import settings
from parcel_backend.app.core.exceptions import ResourceNotFoundError
from parcel_backend.app.domain.lifecycle.parcel_lifecycle import store_guard
from parcel_backend.app.models.enums import RiderStatus, UserRole
from parcel_backend.app.models.rider import Rider
from parcel_backend.app.models.user import User

logger = logging.getLogger(__name__)


class RiderLifecycle:

    @staticmethod
    async def register(
        db: AsyncSession,
        name: Optional[str] = None,
        email: Optional[str] = None,
        district: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Rider:
        """Store a new rider application as pending."""
        rider = Rider(
            name=name,
            email=email,
            district=district,
            details=details or {},
            status=RiderStatus.PENDING,
        )
        async with store_guard(db, "register rider"):
            db.add(rider)
            await db.commit()
            await db.refresh(rider)
        return rider

    @staticmethod
    async def _promote_user(db: AsyncSession, email: Optional[str]) -> bool:
        if not email:
            return False
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            logger.warning("Rider activated but no user found for %s; role not updated", email)
            return False
        user.role = UserRole.RIDER
        await db.flush()
        return True

    @staticmethod
    async def set_status(
        db: AsyncSession,
        rider_id: int,
        status: RiderStatus,
        user_email: Optional[str] = None,
        transactional: Optional[bool] = None,
    ) -> Tuple[Rider, bool]:
        """
        Change a rider's application status.

        Args:
            db: Database session
            rider_id: Rider to update
            status: New status
            user_email: User to promote on activation (defaults to the rider's email)
            transactional: Commit both writes together (defaults to settings)

        Returns:
            (rider, user_role_updated)

        Raises:
            ResourceNotFoundError if the rider does not exist or already has the status
        """
        if transactional is None:
            transactional = settings.transactional_writes
        status = RiderStatus(status)

        async with store_guard(db, "update rider status"):
            result = await db.execute(select(Rider).where(Rider.id == rider_id))
            rider = result.scalar_one_or_none()

            if rider is None or rider.status == status:
                raise ResourceNotFoundError(
                    "Rider", rider_id, message="Rider not found or status already set"
                )

            rider.status = status
            if not transactional:
                await db.commit()

            role_updated = False
            if status == RiderStatus.ACTIVE:
                role_updated = await RiderLifecycle._promote_user(db, user_email or rider.email)

            await db.commit()
            await db.refresh(rider)
        return rider, role_updated
