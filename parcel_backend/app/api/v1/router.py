"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from parcel_backend.app.api.v1.endpoints import (
    auth, users, parcels, rider_tasks, riders, trackings, payments
)

router = APIRouter()

# Session login / logout
router.include_router(auth.router)

# Users and roles
router.include_router(users.router)

# Parcel booking and lifecycle
router.include_router(parcels.router)
router.include_router(rider_tasks.router)

# Rider applications
router.include_router(riders.router)

# Public tracking history
router.include_router(trackings.router)

# Payments and payment intents
router.include_router(payments.router)
