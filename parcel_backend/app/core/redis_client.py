"""
Redis client initialization and connection management.

This module provides the Redis client used for session token revocation.
"""

import redis.asyncio as redis
from parcel_backend.app.core.config import settings


# Create async Redis client (connections are opened lazily on first command)
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Get Redis client instance.

    Used as a FastAPI dependency; tests override it with an in-memory stand-in.
    """
    return redis_client


async def ping_redis(client=None) -> bool:
    """
    Test Redis connection (the shared client unless one is given).

    Returns:
        True if connection successful, False otherwise
    """
    try:
        return bool(await (client or redis_client).ping())
    except Exception:
        return False
