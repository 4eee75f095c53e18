"""
JWT token utilities for session authentication.

This module provides functions for encoding and decoding the locally issued
session tokens carried in the ``token`` cookie.
"""

from datetime import timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from parcel_backend.app.core.clock import utcnow
from parcel_backend.app.core.config import settings


def create_session_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token.

    Args:
        data: Data payload to encode in the token (should include: email, id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "email": "rider@example.com",
            "id": "42",
            "exp": 1234567890
        }
    """
    to_encode = data.copy()

    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.session_token_expire_minutes)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a session token.

    Returns:
        Decoded payload if signature and expiry are valid, None otherwise
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
