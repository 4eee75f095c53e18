"""
Authentication dependencies for FastAPI.

This module resolves inbound credentials into a verified Principal:
- federated: Bearer ID token in the Authorization header
- session: signed JWT in the session cookie
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from parcel_backend.app.core.config import settings
from parcel_backend.app.core.exceptions import AuthenticationError, TokenRevokedError
from parcel_backend.app.core.jwt import decode_session_token
from parcel_backend.app.core.principal import CredentialScheme, Principal
from parcel_backend.app.core.redis_client import get_redis
from parcel_backend.app.core.token_revocation import is_session_token_revoked
from parcel_backend.app.services.container import get_identity_verifier
from parcel_backend.app.services.identity import IdentityVerificationError, IdentityVerifier

# HTTP Bearer security scheme; missing headers are reported by the resolver itself
security = HTTPBearer(auto_error=False)


async def get_federated_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    """
    FastAPI dependency for federated (identity provider) authentication.

    Raises:
        AuthenticationError: 401 if the header is missing or malformed, or
        the identity provider rejects the token
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized access: No token provided or malformed header")

    try:
        claims = await verifier.verify(credentials.credentials)
    except IdentityVerificationError:
        raise AuthenticationError("Unauthorized access: Invalid or expired token")

    return Principal(
        email=claims.get("email"),
        scheme=CredentialScheme.FEDERATED,
        uid=claims.get("uid") or claims.get("sub"),
        claims=claims,
    )


async def get_session_principal(
    request: Request,
    redis=Depends(get_redis),
) -> Principal:
    """
    FastAPI dependency for session cookie authentication.

    Security checks:
    1. Cookie is present
    2. Signature and expiry are valid
    3. Token has not been revoked at logout

    Raises:
        AuthenticationError / TokenRevokedError: 401 if any check fails
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise AuthenticationError("Unauthorized access: No session token found")

    payload = decode_session_token(token)
    if payload is None:
        raise AuthenticationError("Unauthorized access: Invalid session token")

    if await is_session_token_revoked(redis, token):
        raise TokenRevokedError()

    return Principal(
        email=payload.get("email"),
        scheme=CredentialScheme.SESSION,
        uid=payload.get("id"),
        claims=payload,
    )
