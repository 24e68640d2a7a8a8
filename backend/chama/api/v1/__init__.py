"""
API routers.

Routes will be: /api/members, /api/contributions, /api/reports, /api/health
"""
from fastapi import APIRouter

from chama.api.v1.members import router as members_router
from chama.api.v1.contributions import router as contributions_router
from chama.api.v1.reports import router as reports_router
from chama.api.v1.health import router as health_router

api_router = APIRouter()

api_router.include_router(members_router, tags=["members"])
api_router.include_router(contributions_router, tags=["contributions"])
api_router.include_router(reports_router, tags=["reports"])
api_router.include_router(health_router, tags=["health"])

__all__ = [
    "api_router",
]
