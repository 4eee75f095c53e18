"""
Session Authentication API endpoints.

Issues and clears the signed session cookie used by the session-auth routes.
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from parcel_backend.app.core.clock import utcnow
from parcel_backend.app.core.config import settings
from parcel_backend.app.core.exceptions import AuthenticationError
from parcel_backend.app.core.jwt import create_session_token, decode_session_token
from parcel_backend.app.core.redis_client import get_redis
from parcel_backend.app.core.token_revocation import revoke_session_token
from parcel_backend.app.db.session import get_db
from parcel_backend.app.models.user import User
from parcel_backend.app.schemas.auth import LoginRequest, LoginResponse, MessageResponse, SessionUser
from parcel_backend.app.services.audit import log_auth_event, AuditAction

router = APIRouter(tags=["Authentication"])


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        # 'none' for cross-site cookies in production
        "samesite": "none" if settings.is_production else "lax",
    }


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Start a session for a registered email.

    Only the existence of the user is checked. Sets the httpOnly session
    cookie on success; unknown emails get 401 and no cookie.
    """
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()

    if not user:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            email=credentials.email,
            ip_address=_client_ip(request),
            metadata={"reason": "User not found"}
        )
        raise AuthenticationError("Invalid email")

    token = create_session_token({"email": user.email, "id": str(user.id)})
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_token_expire_minutes * 60,
        **_cookie_options()
    )

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        email=user.email,
        ip_address=_client_ip(request)
    )

    return LoginResponse(user=SessionUser(email=user.email, role=user.role))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis)
):
    """
    Clear the session cookie.

    Always succeeds. A still-valid session token is also blacklisted until
    its natural expiry so a copied cookie cannot be replayed.
    """
    token = request.cookies.get(settings.session_cookie_name)
    payload = decode_session_token(token) if token else None

    if payload is not None:
        remaining = int(payload.get("exp", 0) - utcnow().timestamp())
        await revoke_session_token(redis, token, payload.get("email"), ttl_seconds=remaining)
        await log_auth_event(
            db=db,
            action=AuditAction.LOGOUT,
            email=payload.get("email"),
            ip_address=_client_ip(request)
        )

    response.delete_cookie(settings.session_cookie_name, **_cookie_options())
    return MessageResponse(message="Logged out successfully")
