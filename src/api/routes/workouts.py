"""
Workout parsing endpoint.

Turns free-text workout notation into a distance summary. This is a thin
adapter: validation and error mapping live here, all parsing happens in
core.parsing so the same code serves the API and any in-process preview.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.parsing.models import (
    InvalidInputError,
    UnterminatedGroupError,
)
from ..dependencies import (
    AuthenticatedUser,
    SettingsDep,
    WorkoutParserDep,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ParseWorkoutRequest(BaseModel):
    """Workout text plus the swimmer's display preferences."""
    model_config = ConfigDict(populate_by_name=True)

    workout: Optional[str] = Field(
        default=None,
        description="Free-text workout, one set per line",
    )
    pool_type: str = Field(
        default="SCM",
        alias="poolType",
        description="Pool type (SCM, LCM, SCY). Only affects unit labels on the client.",
    )
    intensity_system: Optional[str] = Field(
        default=None,
        alias="intensitySystem",
        description="Colour vocabulary: polar or international. Defaults to server setting.",
    )


class WorkoutSummaryResponse(BaseModel):
    """Distance summary for one workout."""
    model_config = ConfigDict(populate_by_name=True)

    total_distance: int = Field(alias="totalDistance", description="Total distance swum")
    stroke_distances: dict[str, int] = Field(
        alias="strokeDistances",
        description="Distance per stroke; every stroke is always present",
    )
    intensity_distances: dict[str, int] = Field(
        alias="intensityDistances",
        description="Distance per intensity marker; only markers that appeared",
    )
    stroke_type_distances: dict[str, int] = Field(
        alias="strokeTypeDistances",
        description="Distance per stroke type (drill, kick, scull, normal)",
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/parse",
    response_model=WorkoutSummaryResponse,
    status_code=status.HTTP_200_OK,
    summary="Parse workout text",
    description="Convert free-text swim workout notation into total, per-stroke and per-intensity distances",
)
async def parse_workout(
    request: ParseWorkoutRequest,
    api_key: AuthenticatedUser = None,
    parser: WorkoutParserDep = None,
    settings: SettingsDep = None,
) -> WorkoutSummaryResponse:
    """
    Parse a workout.

    Accepted notation includes:
    - ``4x100 free hr160`` repeats on a single line
    - ``3x`` on its own line, applying to the next line or group
    - ``2x(100 fly + 100 back)`` groups, which may span several lines

    Text the parser doesn't recognise contributes no distance; only a
    missing workout or an unknown intensity system is rejected.
    """
    if not request.workout or not request.workout.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No workout text provided"
        )

    if len(request.workout) > settings.max_workout_length:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Workout text exceeds {settings.max_workout_length} characters"
        )

    logger.info(
        "Parsing workout",
        extra={
            "pool_type": request.pool_type,
            "intensity_system": request.intensity_system or parser.default_system.value,
            "text_length": len(request.workout),
        }
    )

    try:
        summary = parser.parse(request.workout, request.intensity_system)

    except InvalidInputError as e:
        logger.warning("Rejected workout input", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except UnterminatedGroupError as e:
        logger.warning(
            "Unterminated bracket group",
            extra={"line_number": e.line_number}
        )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except Exception as e:
        logger.error(
            "Workout parsing failed",
            extra={"error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to parse workout: {str(e)}"
        )

    logger.info(
        "Workout parsed",
        extra={"total_distance": summary.total_distance}
    )

    return WorkoutSummaryResponse.model_validate(summary.to_dict())
