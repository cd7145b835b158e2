"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from talentbridge.api.routes.application_routes import router as application_router
from talentbridge.api.routes.auth_routes import router as auth_router
from talentbridge.api.routes.listing_routes import job_router, program_router
from talentbridge.api.routes.user_routes import router as user_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(job_router)
api_router.include_router(program_router)
api_router.include_router(application_router)
