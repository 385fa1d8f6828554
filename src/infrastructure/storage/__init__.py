"""
Workout log persistence.

JSON flat-file store for real use, in-memory store for local development
and tests.
"""

from .client import (
    JsonFileWorkoutStore,
    MockWorkoutStore,
    StoreConfig,
    WorkoutNotFoundError,
    WorkoutStore,
    WorkoutStoreError,
    create_workout_store,
)

__all__ = [
    "JsonFileWorkoutStore",
    "MockWorkoutStore",
    "StoreConfig",
    "WorkoutNotFoundError",
    "WorkoutStore",
    "WorkoutStoreError",
    "create_workout_store",
]
