"""
Health check endpoint for the REST API.
"""

from fastapi import APIRouter

from ordo_shared.utils.clock import now_utc
from ordo_shared.utils.schemas import HealthOutput

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthOutput)
def health_check() -> HealthOutput:
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return HealthOutput(status="OK", timestamp=now_utc(), service="Ordo API")
