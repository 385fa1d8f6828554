"""
Domain models for the workout log.

A logged workout is the raw text the swimmer wrote plus the summary the
parser produced for it, filed under a calendar date. The summary is kept as
an opaque JSON object so entries written by older parser versions still load.
"""

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union
from uuid import uuid4


def to_date_key(value: Union[date, datetime, str]) -> str:
    """
    Normalise a date, datetime or ISO string to a ``YYYY-MM-DD`` key.

    Raises ValueError for strings that are not ISO dates or datetimes.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = value.strip()
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        return datetime.fromisoformat(text).date().isoformat()


def month_bounds(day: Union[date, str]) -> tuple[date, date]:
    """First and last day of the month containing ``day``."""
    if isinstance(day, str):
        day = date.fromisoformat(to_date_key(day))
    last = monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


@dataclass
class WorkoutEntry:
    """One logged workout."""
    text: str
    summary: dict[str, Any]
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.text.strip():
            raise ValueError("Workout text cannot be empty")

    def revise(self, text: str, summary: dict[str, Any]) -> None:
        """Replace text and summary, keeping id and creation time."""
        if not text.strip():
            raise ValueError("Workout text cannot be empty")
        self.text = text
        self.summary = summary
        self.updated_at = datetime.utcnow()

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "text": self.text,
            "summary": self.summary,
            "createdAt": self.created_at.isoformat(),
        }
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkoutEntry":
        updated_at = data.get("updatedAt")
        return cls(
            id=str(data["id"]),
            text=data["text"],
            summary=data.get("summary") or {},
            created_at=_parse_timestamp(data["createdAt"]),
            updated_at=_parse_timestamp(updated_at) if updated_at else None,
        )


def _parse_timestamp(value: str) -> datetime:
    # Entries written by the browser client end in "Z".
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
