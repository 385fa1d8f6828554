"""
Workout log storage.

Logged workouts live in a single JSON file shaped as
``{"YYYY-MM-DD": [entry, ...]}``. That is plenty for a personal training
log and keeps the data human-readable and easy to back up.

Mock mode keeps the same structure in memory, enabling API testing without
touching the file system.
"""

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from ...core.logbook.models import WorkoutEntry, month_bounds, to_date_key

logger = logging.getLogger(__name__)


class WorkoutStoreError(Exception):
    """Raised when the workout log cannot be read or written."""
    pass


class WorkoutNotFoundError(WorkoutStoreError):
    """Raised when no workout matches the requested date or id."""
    pass


@dataclass
class StoreConfig:
    """Configuration for the JSON file store."""
    path: Path


class WorkoutStore(Protocol):
    """
    Protocol for workout log persistence.

    Routes depend on this, not on a concrete store, so tests can swap in
    the in-memory store.
    """

    def add(self, day: Union[date, str], text: str, summary: dict[str, Any]) -> WorkoutEntry:
        """File a new workout under ``day`` and return it."""
        ...

    def list_month(self, day: Union[date, str]) -> dict[str, list[WorkoutEntry]]:
        """All workouts in the calendar month containing ``day``."""
        ...

    def update(
        self,
        day: Union[date, str],
        workout_id: str,
        text: str,
        summary: dict[str, Any],
    ) -> WorkoutEntry:
        """Replace text and summary of an existing workout."""
        ...

    def delete(self, day: Union[date, str], workout_id: str) -> None:
        """Remove a workout; drops the date key once it is empty."""
        ...


class _DateKeyedStore:
    """
    Shared behaviour for stores holding ``{date_key: [entry dicts]}``.

    Subclasses provide _load and _save; every mutation is load, modify, save
    under a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        raise NotImplementedError

    def _save(self, workouts: dict[str, list[dict[str, Any]]]) -> None:
        raise NotImplementedError

    def add(self, day: Union[date, str], text: str, summary: dict[str, Any]) -> WorkoutEntry:
        date_key = to_date_key(day)
        entry = WorkoutEntry(text=text, summary=summary)

        with self._lock:
            workouts = self._load()
            workouts.setdefault(date_key, []).append(entry.to_dict())
            self._save(workouts)

        logger.info(
            "Saved workout",
            extra={"date": date_key, "workout_id": entry.id}
        )
        return entry

    def list_month(self, day: Union[date, str]) -> dict[str, list[WorkoutEntry]]:
        start, end = month_bounds(day)

        with self._lock:
            workouts = self._load()

        month: dict[str, list[WorkoutEntry]] = {}
        for date_key, entries in workouts.items():
            try:
                entry_date = date.fromisoformat(date_key)
            except ValueError:
                logger.warning("Skipping malformed date key", extra={"date": date_key})
                continue
            if start <= entry_date <= end:
                month[date_key] = [WorkoutEntry.from_dict(e) for e in entries]
        return month

    def update(
        self,
        day: Union[date, str],
        workout_id: str,
        text: str,
        summary: dict[str, Any],
    ) -> WorkoutEntry:
        date_key = to_date_key(day)

        with self._lock:
            workouts = self._load()
            entries = workouts.get(date_key)
            if not entries:
                raise WorkoutNotFoundError(f"No workouts found for {date_key}")

            for index, raw in enumerate(entries):
                if str(raw.get("id")) == workout_id:
                    entry = WorkoutEntry.from_dict(raw)
                    entry.revise(text, summary)
                    entries[index] = entry.to_dict()
                    break
            else:
                raise WorkoutNotFoundError(f"Workout not found: {workout_id}")

            self._save(workouts)

        logger.info(
            "Updated workout",
            extra={"date": date_key, "workout_id": workout_id}
        )
        return entry

    def delete(self, day: Union[date, str], workout_id: str) -> None:
        date_key = to_date_key(day)

        with self._lock:
            workouts = self._load()
            entries = workouts.get(date_key)
            if not entries:
                raise WorkoutNotFoundError(f"No workouts found for {date_key}")

            remaining = [e for e in entries if str(e.get("id")) != workout_id]
            if len(remaining) == len(entries):
                raise WorkoutNotFoundError(f"Workout not found: {workout_id}")

            if remaining:
                workouts[date_key] = remaining
            else:
                del workouts[date_key]

            self._save(workouts)

        logger.info(
            "Deleted workout",
            extra={"date": date_key, "workout_id": workout_id}
        )


class JsonFileWorkoutStore(_DateKeyedStore):
    """
    Workout log backed by a JSON file.

    A missing file is created empty. A file that is unreadable or not a
    JSON object is reset to ``{}`` and the problem is logged.
    """

    def __init__(self, config: StoreConfig) -> None:
        super().__init__()
        self._path = Path(config.path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(
            "Initialized JSON workout store",
            extra={"path": str(self._path)}
        )

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self._path.exists():
            self._save({})
            return {}

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(
                "Failed to load workouts, resetting store",
                extra={"path": str(self._path), "error": str(e)}
            )
            self._save({})
            return {}

        if not isinstance(data, dict):
            logger.error(
                "Workout store is not a JSON object, resetting store",
                extra={"path": str(self._path)}
            )
            self._save({})
            return {}

        return data

    def _save(self, workouts: dict[str, list[dict[str, Any]]]) -> None:
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(workouts, handle, indent=2)
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error(
                "Failed to save workouts",
                extra={"path": str(self._path), "error": str(e)}
            )
            raise WorkoutStoreError(f"Failed to save workouts: {e}")


# ---------------------------------------------------------------------------
# Mock Store for Local Development
# ---------------------------------------------------------------------------

class MockWorkoutStore(_DateKeyedStore):
    """
    In-memory workout log.

    Behaves exactly like the file store but nothing survives a restart.
    """

    def __init__(self) -> None:
        super().__init__()
        self._workouts: dict[str, list[dict[str, Any]]] = {}
        logger.info("Initialized mock workout store (in-memory)")

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        return json.loads(json.dumps(self._workouts))

    def _save(self, workouts: dict[str, list[dict[str, Any]]]) -> None:
        self._workouts = workouts


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_workout_store(
    config: Optional[StoreConfig] = None,
    mock_mode: bool = False,
) -> WorkoutStore:
    """
    Create a workout store based on configuration.

    Args:
        config: Store configuration (required if not mock_mode)
        mock_mode: If True, return an in-memory store

    Returns:
        WorkoutStore implementation (JSON file or mock)
    """
    if mock_mode:
        return MockWorkoutStore()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return JsonFileWorkoutStore(config)
