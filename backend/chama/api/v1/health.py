"""
Health check endpoints.
"""
from fastapi import APIRouter
from chama.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="OK")
