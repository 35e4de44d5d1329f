"""
Health Check Routes

Liveness and readiness endpoints for monitoring.
"""
from fastapi import APIRouter
from pydantic import BaseModel
from webtest_agent.config import settings
from webtest_agent.llm import get_api_key

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model"""
    status: str
    version: str
    service: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint

    Returns:
        Health status
    """
    return HealthResponse(
        status="healthy",
        version=settings.api_version,
        service="webtest-agent",
    )


@router.get("/ready")
async def readiness_check():
    """
    Readiness check endpoint

    Reasoning counts as ready when it is disabled (heuristics only) or when
    the configured provider has credentials.
    """
    reasoning_ready = True
    if settings.reasoning_enabled:
        reasoning_ready = bool(get_api_key(settings, settings.llm_provider.lower()))

    return {
        "ready": reasoning_ready,
        "checks": {
            "api": True,
            "reasoning": reasoning_ready,
            "automation_backend": settings.automation_backend,
        }
    }
