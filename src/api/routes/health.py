"""
Health check endpoints.

We provide two endpoints:
- /health: Basic liveness check (is the process running?)
- /health/ready: Readiness check (can we serve traffic?)

The distinction matters in orchestration systems like Kubernetes
where liveness and readiness have different behaviors.
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from ... import __version__
from ..dependencies import SettingsDep, WorkoutParserDep, WorkoutStoreDep

logger = logging.getLogger(__name__)

router = APIRouter()

# A workout whose summary is known, used to check the parser end to end
_CANARY_WORKOUT = "4x100 free"
_CANARY_DISTANCE = 400


class HealthResponse(BaseModel):
    """
    Health check response.

    Standardized format makes it easy for monitoring tools to parse.
    """
    status: str
    version: str
    details: dict[str, Any] = {}


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""
    name: str
    status: str  # "ok" or "error"
    error: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response with details."""
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ReadinessCheck]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """Liveness check - is the process alive?"""
    return HealthResponse(
        status="ok",
        version=__version__,
        details={
            "mock_mode": {
                "workout_store": settings.workout_store_mock_mode,
            },
            "intensity_system": settings.default_intensity_system,
        }
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the service can handle traffic. Checks configuration, parser and storage.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(
    response: Response,
    settings: SettingsDep,
    parser: WorkoutParserDep,
    store: WorkoutStoreDep,
) -> ReadinessResponse:
    """
    Readiness check - can we serve traffic?

    Returns 503 if any check fails, which tells load balancers not
    to route traffic here.
    """
    checks: list[ReadinessCheck] = []

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        checks.append(ReadinessCheck(
            name="configuration",
            status="error",
            error=f"Missing required fields: {', '.join(missing_fields)}"
        ))
    else:
        checks.append(ReadinessCheck(name="configuration", status="ok"))

    try:
        distance = parser.parse(_CANARY_WORKOUT).total_distance
        if distance == _CANARY_DISTANCE:
            checks.append(ReadinessCheck(name="parser", status="ok"))
        else:
            checks.append(ReadinessCheck(
                name="parser",
                status="error",
                error=f"Expected {_CANARY_DISTANCE}, got {distance}"
            ))
    except Exception as e:
        logger.error("Parser health check failed", extra={"error": str(e)})
        checks.append(ReadinessCheck(name="parser", status="error", error=str(e)))

    try:
        store.list_month(date.today())
        checks.append(ReadinessCheck(
            name="workout_store",
            status="ok",
            error="mock mode" if settings.workout_store_mock_mode else None
        ))
    except Exception as e:
        logger.error("Workout store health check failed", extra={"error": str(e)})
        checks.append(ReadinessCheck(name="workout_store", status="error", error=str(e)))

    all_ok = all(check.status == "ok" for check in checks)
    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(
            "Readiness check failed",
            extra={
                "checks": [
                    {"name": c.name, "status": c.status, "error": c.error}
                    for c in checks
                ]
            }
        )

    return ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=__version__,
        checks=checks,
    )
