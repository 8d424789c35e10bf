"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from profilehub.api.routes.profile_routes import router as profile_router
from profilehub.api.routes.opportunity_routes import router as opportunity_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(profile_router)
api_router.include_router(opportunity_router)
