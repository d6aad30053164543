"""Liveness check. Touches neither the store nor the identity provider."""

from fastapi import APIRouter

from firmspace.core.config import get_settings
from firmspace.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(service=settings.app_name, version=settings.app_version)
