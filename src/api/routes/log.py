"""
Workout log API endpoints.

Stores the swimmer's workouts by calendar date: the text they wrote and the
summary the parser produced. Reads are by month, which is what calendar
and history views ask for.
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.logbook.models import WorkoutEntry, to_date_key
from ...core.parsing.models import WorkoutSummary
from ...infrastructure.storage.client import WorkoutNotFoundError, WorkoutStoreError
from ..dependencies import AuthenticatedUser, WorkoutStoreDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class WorkoutItem(BaseModel):
    """A logged workout as returned to clients."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Workout identifier")
    text: str = Field(description="Workout text as written")
    summary: dict[str, Any] = Field(description="Parsed summary stored with the workout")
    created_at: str = Field(alias="createdAt", description="When the workout was logged (ISO format)")
    updated_at: str | None = Field(None, alias="updatedAt", description="Last edit time (ISO format)")

    @classmethod
    def from_entry(cls, entry: WorkoutEntry) -> "WorkoutItem":
        return cls.model_validate(entry.to_dict())


class CreateWorkoutRequest(BaseModel):
    """A workout to log."""
    date: str = Field(description="Calendar date (YYYY-MM-DD or ISO datetime)", min_length=1)
    text: str = Field(description="Workout text", min_length=1)
    summary: dict[str, Any] = Field(description="Summary returned by the parse endpoint")


class UpdateWorkoutRequest(BaseModel):
    """New text and summary for an existing workout."""
    text: str = Field(description="Workout text", min_length=1)
    summary: dict[str, Any] = Field(description="Summary returned by the parse endpoint")


class WorkoutSavedResponse(BaseModel):
    success: bool = True
    workout: WorkoutItem


class MonthWorkoutsResponse(BaseModel):
    workouts: dict[str, list[WorkoutItem]] = Field(
        description="Workouts in the requested month, keyed by YYYY-MM-DD"
    )


class DeletedResponse(BaseModel):
    success: bool = True


def _date_key(value: str) -> str:
    try:
        return to_date_key(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date: {value}"
        )


def _summary(data: dict[str, Any]) -> dict[str, Any]:
    """Normalise a client summary to the full parser shape."""
    try:
        return WorkoutSummary.from_dict(data).to_dict()
    except (AttributeError, TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid workout summary"
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=WorkoutSavedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a workout",
    description="Save workout text and its parsed summary under a calendar date",
)
async def create_workout(
    request: CreateWorkoutRequest,
    api_key: AuthenticatedUser = None,
    store: WorkoutStoreDep = None,
) -> WorkoutSavedResponse:
    date_key = _date_key(request.date)
    summary = _summary(request.summary)

    try:
        entry = store.add(date_key, request.text, summary)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except WorkoutStoreError as e:
        logger.error(
            "Failed to save workout",
            extra={"date": date_key, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save workout: {str(e)}"
        )

    return WorkoutSavedResponse(workout=WorkoutItem.from_entry(entry))


@router.get(
    "",
    response_model=MonthWorkoutsResponse,
    status_code=status.HTTP_200_OK,
    summary="List a month of workouts",
    description="Return every logged workout in the calendar month containing the given date",
)
async def list_workouts(
    day: str = Query(alias="date", description="Any date inside the month to list"),
    api_key: AuthenticatedUser = None,
    store: WorkoutStoreDep = None,
) -> MonthWorkoutsResponse:
    date_key = _date_key(day)

    try:
        month = store.list_month(date.fromisoformat(date_key))
    except WorkoutStoreError as e:
        logger.error(
            "Failed to load workouts",
            extra={"date": date_key, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load workouts"
        )

    return MonthWorkoutsResponse(
        workouts={
            key: [WorkoutItem.from_entry(entry) for entry in entries]
            for key, entries in sorted(month.items())
        }
    )


@router.put(
    "",
    response_model=WorkoutSavedResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit a workout",
    description="Replace the text and summary of a logged workout",
)
async def update_workout(
    request: UpdateWorkoutRequest,
    day: str = Query(alias="date", description="Date the workout is filed under"),
    workout_id: str = Query(alias="id", description="Workout identifier"),
    api_key: AuthenticatedUser = None,
    store: WorkoutStoreDep = None,
) -> WorkoutSavedResponse:
    date_key = _date_key(day)
    summary = _summary(request.summary)

    try:
        entry = store.update(date_key, workout_id, request.text, summary)
    except WorkoutNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except WorkoutStoreError as e:
        logger.error(
            "Failed to update workout",
            extra={"date": date_key, "workout_id": workout_id, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update workout"
        )

    return WorkoutSavedResponse(workout=WorkoutItem.from_entry(entry))


@router.delete(
    "",
    response_model=DeletedResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a workout",
    description="Remove a logged workout; the date disappears from the log once it has none left",
)
async def delete_workout(
    day: str = Query(alias="date", description="Date the workout is filed under"),
    workout_id: str = Query(alias="id", description="Workout identifier"),
    api_key: AuthenticatedUser = None,
    store: WorkoutStoreDep = None,
) -> DeletedResponse:
    date_key = _date_key(day)

    try:
        store.delete(date_key, workout_id)
    except WorkoutNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except WorkoutStoreError as e:
        logger.error(
            "Failed to delete workout",
            extra={"date": date_key, "workout_id": workout_id, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete workout"
        )

    return DeletedResponse()
