"""
Database seeding script for the first admin.

Admins can only be made by other admins, so the first one has to be
created directly in the database. Run after the database is reachable:

    python -m parcel_backend.seed_users admin@example.com
"""

import asyncio
import sys

from sqlalchemy import select

from parcel_backend.app.db.session import AsyncSessionLocal, Base, engine
from parcel_backend.app.models.enums import UserRole

# Import models to ensure they are registered with Base
from parcel_backend.app.models.user import User
from parcel_backend.app.models.parcel import Parcel
from parcel_backend.app.models.rider import Rider
from parcel_backend.app.models.payment import Payment
from parcel_backend.app.models.tracking_event import TrackingEvent
from parcel_backend.app.models.audit_log import AuditLog

DEFAULT_ADMIN_EMAIL = "admin@parcel.local"


async def seed_admin(email: str = DEFAULT_ADMIN_EMAIL):
    """
    Create ``email`` as an admin, or promote the existing user with that email.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print(f"🌱 Seeding admin {email}...")

        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            db.add(User(email=email, display_name="Admin", role=UserRole.ADMIN))
            print("✅ Created admin user")
        elif user.role == UserRole.ADMIN:
            print("ℹ️  User is already an admin, skipping seeding")
            return
        else:
            print(f"✅ Promoting existing {user.role.value} to admin")
            user.role = UserRole.ADMIN

        await db.commit()

    print(f"\n🎉 Log in with POST /login {{\"email\": \"{email}\"}}")


if __name__ == "__main__":
    asyncio.run(seed_admin(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_ADMIN_EMAIL))
