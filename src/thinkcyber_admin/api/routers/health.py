"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from thinkcyber_admin import __version__
from thinkcyber_admin.config.settings import settings


class HealthStatus(BaseModel):
    """Gateway health status."""

    model_config = ConfigDict(populate_by_name=True)

    status: str  # "healthy"
    version: str  # thinkcyber-admin version
    backend_url: str  # configured API_BASE_URL
    token_configured: bool  # default API_TOKEN present
    timestamp: datetime


class HealthResponse(BaseModel):
    """Envelope for the health check endpoint."""

    success: bool = True
    data: HealthStatus


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint - makes no backend call.

    Reports the gateway version and its backend configuration.
    """
    return HealthResponse(
        data=HealthStatus(
            status="healthy",
            version=__version__,
            backend_url=settings.api_base_url,
            token_configured=settings.has_api_token,
            timestamp=datetime.now(timezone.utc),
        )
    )
