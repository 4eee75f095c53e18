"""
Session token revocation using Redis.

Logout blacklists the presented session token so it cannot be replayed
before its natural expiry.
"""

import logging
from parcel_backend.app.core.config import settings

logger = logging.getLogger(__name__)

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:session:"


async def revoke_session_token(redis_client, token: str, email: str, ttl_seconds: int = None) -> bool:
    """
    Revoke a session token by adding it to the blacklist.

    Args:
        redis_client: Async Redis client
        token: The session token string to revoke
        email: Principal email owning the token (stored for audit purposes)
        ttl_seconds: Remaining token lifetime; defaults to the full session lifetime

    Returns:
        True if successfully revoked, False otherwise
    """
    if ttl_seconds is None:
        ttl_seconds = settings.session_token_expire_minutes * 60
    if ttl_seconds <= 0:
        # Already expired, nothing to blacklist
        return True

    try:
        await redis_client.set(f"{TOKEN_BLACKLIST_PREFIX}{token}", email, ex=ttl_seconds)
        return True
    except Exception:
        logger.exception("Error revoking session token for %s", email)
        return False


async def is_session_token_revoked(redis_client, token: str) -> bool:
    """
    Check if a session token has been revoked.

    Returns:
        True if token is revoked, False otherwise
    """
    try:
        exists = await redis_client.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except Exception:
        logger.exception("Error checking session token revocation")
        # Fail-open: if Redis is down, allow the request (availability over strictness)
        return False
