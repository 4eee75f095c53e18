"""
Server clock.

All lifecycle timestamps are stamped in UTC from a single place so tests can
patch it.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
