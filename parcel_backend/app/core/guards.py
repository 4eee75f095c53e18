"""
Security guards for role-based and ownership-based access control.

Provides dependencies for protecting endpoints.
"""

from typing import Callable, Optional
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from parcel_backend.app.core.dependencies import get_federated_principal, get_session_principal
from parcel_backend.app.core.exceptions import AuthenticationError, InsufficientPermissionsError
from parcel_backend.app.core.principal import Principal
from parcel_backend.app.db.session import get_db
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.models.user import User


async def authorize(db: AsyncSession, principal: Principal, required_role: UserRole) -> User:
    """
    Check that the principal's user record carries the required role.

    Args:
        db: Database session
        principal: Verified request principal
        required_role: Role the caller must hold

    Returns:
        The caller's User record

    Raises:
        AuthenticationError 401 if the principal carries no email
        InsufficientPermissionsError 403 if no user matches or the role differs
    """
    if not principal.email:
        raise AuthenticationError("Unauthorized access: Email not found in token")

    result = await db.execute(select(User).where(User.email == principal.email))
    user = result.scalar_one_or_none()

    if user is None or user.role != required_role:
        raise InsufficientPermissionsError(
            f"Forbidden access: Not a {required_role.value}",
            details={"required_role": required_role.value}
        )

    return user


def require_role(required_role: UserRole, resolver: Callable = get_federated_principal):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/riders/pending")
        async def pending(principal: Principal = Depends(require_role(UserRole.ADMIN))):
            ...

    Args:
        required_role: Role the caller must hold
        resolver: Principal resolver dependency (federated by default)

    Returns:
        FastAPI dependency returning the authorized Principal
    """
    async def role_checker(
        principal: Principal = Depends(resolver),
        db: AsyncSession = Depends(get_db)
    ) -> Principal:
        await authorize(db, principal, required_role)
        return principal

    return role_checker


require_admin = require_role(UserRole.ADMIN)
require_rider = require_role(UserRole.RIDER)
require_session_admin = require_role(UserRole.ADMIN, resolver=get_session_principal)


def ensure_owner(principal: Principal, resource_email: Optional[str], message: str = "Forbidden access"):
    """
    Enforce that the principal owns the resource, raise 403 otherwise.

    Usage:
        ensure_owner(principal, parcel.assigned_rider_email, "This parcel is not assigned to you")
    """
    if not principal.email or principal.email != resource_email:
        raise InsufficientPermissionsError(message)
