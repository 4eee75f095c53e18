"""
User database model.

Users are keyed by email and created through the sign-up upsert.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from parcel_backend.app.db.session import Base
from parcel_backend.app.models.enums import UserRole, enum_values


class User(Base):
    """
    User model for authentication and role-based access.

    Profile fields mirror what the identity provider reports at sign-in.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255), nullable=True)
    photo_url = Column(String(1024), nullable=True)
    last_sign_in_time = Column(String(100), nullable=True)

    role = Column(
        Enum(UserRole, values_callable=enum_values, native_enum=False, length=20),
        default=UserRole.USER,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
