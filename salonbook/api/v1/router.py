"""
API v1 router setup
Organized into: client routes (JWT) and owner routes (JWT + OWNER role)
"""
from fastapi import APIRouter

from salonbook.config.settings import get_settings
from salonbook.api.v1 import availability, reservations, holidays, working_hours

api_v1_router = APIRouter()

# ============================================================================
# CLIENT ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(availability.router)
api_v1_router.include_router(reservations.router)

# ============================================================================
# MIXED ROUTES (listing for all users, maintenance for the owner)
# ============================================================================
api_v1_router.include_router(holidays.router)

# ============================================================================
# OWNER ROUTES (JWT authentication + OWNER role required)
# ============================================================================
api_v1_router.include_router(working_hours.router)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "client": "JWT Bearer token required",
            "owner": "JWT Bearer token with OWNER role required",
        },
        "slot_granularity_minutes": get_settings().SLOT_INTERVAL_MINUTES,
    }
