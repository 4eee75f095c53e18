"""
User and rider enumerations.

Defines the role and rider application status types for the parcel platform.
"""

import enum


def enum_values(enum_cls):
    """Persist enum values (not member names) in SQLAlchemy Enum columns."""
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Manages parcels, riders and user roles
        RIDER: Delivers assigned parcels and cashes out completed ones
        USER: Sends parcels and pays for them (default role)
    """
    ADMIN = "admin"
    RIDER = "rider"
    USER = "user"


class RiderStatus(str, enum.Enum):
    """
    Rider application status.

    Status flow:
        PENDING → ACTIVE | REJECTED
    """
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
