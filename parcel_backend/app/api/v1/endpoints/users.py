"""
User API Endpoints.

Public profile reads, the sign-in upsert, and the two admin role-change
routes (one per credential scheme).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from parcel_backend.app.core.exceptions import InsufficientPermissionsError, ResourceNotFoundError
from parcel_backend.app.core.guards import require_admin, require_session_admin
from parcel_backend.app.core.principal import Principal
from parcel_backend.app.db.session import get_db
from parcel_backend.app.domain.lifecycle.parcel_lifecycle import store_guard
from parcel_backend.app.models.enums import UserRole
from parcel_backend.app.models.user import User
from parcel_backend.app.schemas.user import (
    UserUpsert, UserResponse, UserRoleResponse, UserRoleUpdate, UserRoleChangeResponse
)
from parcel_backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/users", tags=["Users"])


async def _get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


@router.get("", response_model=List[UserResponse])
async def list_users(
    email: Optional[str] = Query(None, description="Return only the user with this email"),
    db: AsyncSession = Depends(get_db)
):
    """
    List all users, or the single user matching ``email`` (as a list).

    Public: used by clients to check whether an account exists.
    """
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    if email:
        query = select(User).where(User.email == email)

    async with store_guard(db, "fetch users"):
        result = await db.execute(query)
        users = result.scalars().all()

    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def upsert_user(
    user_data: UserUpsert,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create or update a user keyed on email.

    Profile fields are overwritten on every call. Role is never changed here:
    new users start as 'user', and requesting any other role is rejected.
    """
    if user_data.role is not None and user_data.role != UserRole.USER:
        raise InsufficientPermissionsError("Role escalation requires an admin")

    async with store_guard(db, "upsert user"):
        user = await _get_user_by_email(db, user_data.email)
        if user is None:
            user = User(email=user_data.email, role=UserRole.USER)
            db.add(user)
        else:
            response.status_code = status.HTTP_200_OK

        user.display_name = user_data.display_name
        user.photo_url = user_data.photo_url
        user.last_sign_in_time = user_data.last_sign_in_time

        await db.commit()
        await db.refresh(user)

    return UserResponse.model_validate(user)


@router.get("/role/{email}", response_model=UserRoleResponse)
async def get_user_role(
    email: str = Path(..., description="User email"),
    db: AsyncSession = Depends(get_db)
):
    user = await _get_user_by_email(db, email)
    if not user:
        raise ResourceNotFoundError("User", message="User not found")
    return UserRoleResponse(role=user.role or UserRole.USER)


@router.patch("/make-admin/{email}", response_model=UserRoleChangeResponse)
async def make_admin(
    email: str = Path(..., description="Email of the user to promote"),
    admin: Principal = Depends(require_session_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Promote a user to admin (session-authenticated admins only).
    """
    async with store_guard(db, "promote user"):
        user = await _get_user_by_email(db, email)
        if not user:
            raise ResourceNotFoundError("User", message="User not found")

        previous_role = user.role
        user.role = UserRole.ADMIN
        await db.commit()
        await db.refresh(user)

    await log_event(
        db=db,
        action=AuditAction.ROLE_CHANGED,
        actor_email=admin.email,
        target=f"user:{user.email}",
        metadata={"from": previous_role.value, "to": UserRole.ADMIN.value, "scheme": admin.scheme.value}
    )

    return UserRoleChangeResponse(message="User promoted to admin", user=UserResponse.model_validate(user))


@router.patch("/{user_id}/role", response_model=UserRoleChangeResponse)
async def update_user_role(
    user_id: int = Path(..., description="User ID"),
    role_data: UserRoleUpdate = ...,
    admin: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Set a user's role (federated-authenticated admins only).

    Unknown roles are rejected with 400; a missing user or an unchanged role is 404.
    """
    async with store_guard(db, "update user role"):
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user or user.role == role_data.role:
            raise ResourceNotFoundError("User", user_id, message="User not found or role already set")

        previous_role = user.role
        user.role = role_data.role
        await db.commit()
        await db.refresh(user)

    await log_event(
        db=db,
        action=AuditAction.ROLE_CHANGED,
        actor_email=admin.email,
        target=f"user:{user.email}",
        metadata={"from": previous_role.value, "to": role_data.role.value, "scheme": admin.scheme.value}
    )

    return UserRoleChangeResponse(
        message=f"User role updated to {role_data.role.value}",
        user=UserResponse.model_validate(user)
    )


@router.get("/{email}", response_model=UserResponse)
async def get_user(
    email: str = Path(..., description="User email"),
    db: AsyncSession = Depends(get_db)
):
    user = await _get_user_by_email(db, email)
    if not user:
        raise ResourceNotFoundError("User", message="User not found")
    return UserResponse.model_validate(user)
