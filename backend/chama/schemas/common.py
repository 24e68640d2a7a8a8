"""
Common schemas used across the application.
"""
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness probe response."""
    status: str = "OK"


class DeletedResponse(BaseModel):
    """Id of a deleted record."""
    id: str
