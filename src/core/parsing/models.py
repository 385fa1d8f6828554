"""
Domain models for workout parsing.

These models describe what the parser produces: a WorkoutSummary with
distance broken down by stroke, stroke type and intensity. Like the rest
of the core they have no dependencies on FastAPI or storage.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class WorkoutParseError(Exception):
    """Base class for parser failures."""
    pass


class InvalidInputError(WorkoutParseError, ValueError):
    """Raised when the workout text or intensity system is structurally invalid."""
    pass


class UnterminatedGroupError(WorkoutParseError):
    """
    Raised in strict mode when the text ends inside a bracket group.

    The lenient parser drops the buffered group instead, which undercounts
    distance without telling anyone.
    """

    def __init__(self, line_number: int) -> None:
        self.line_number = line_number
        super().__init__(
            f"Bracket group opened on line {line_number} is never closed"
        )


# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

class StrokeName(Enum):
    """The six stroke buckets tracked in a summary."""
    FREESTYLE = "freestyle"
    BACKSTROKE = "backstroke"
    BREASTSTROKE = "breaststroke"
    BUTTERFLY = "butterfly"
    IM = "im"
    CHOICE = "choice"


class StrokeType(Enum):
    """How a stroke is swum: full stroke or one of the modifiers."""
    DRILL = "drill"
    KICK = "kick"
    SCULL = "scull"
    NORMAL = "normal"


class IntensitySystem(Enum):
    """Colour vocabulary the swimmer uses for intensity zones."""
    POLAR = "polar"
    INTERNATIONAL = "international"

    @classmethod
    def coerce(cls, value: Union["IntensitySystem", str]) -> "IntensitySystem":
        """Accept an enum member or its string value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidInputError(
            f"Invalid intensity system: {value!r}. "
            f"Expected one of: {', '.join(s.value for s in cls)}"
        )


class IntensityFamily(Enum):
    """The kinds of intensity marker a line can carry."""
    HEART_RATE = "heart_rate"
    HEART_RATE_BY_10 = "heart_rate_by_10"
    STANDARD = "standard"
    POLAR_ZONES = "polar_zones"
    INTERNATIONAL = "international"


HEART_RATE_VALUES = (150, 155, 160, 165, 170, 175, 180, 185, 190)
HEART_RATE_BY_10_VALUES = (24, 25, 26, 27, 28, 29, 30)
STANDARD_INTENSITIES = ("easy", "moderate", "strong", "fast")
POLAR_ZONES = ("grey", "blue", "green", "orange", "red")
INTERNATIONAL_COLORS = ("yellow", "white", "pink", "red", "blue", "brown", "purple")


@dataclass(frozen=True)
class IntensityTag:
    """
    A single intensity marker detected in a piece of workout text.

    Frozen because tags are values: "hr165" seen twice is the same tag.
    """
    family: IntensityFamily
    value: Union[int, str]

    def __post_init__(self) -> None:
        allowed = {
            IntensityFamily.HEART_RATE: HEART_RATE_VALUES,
            IntensityFamily.HEART_RATE_BY_10: HEART_RATE_BY_10_VALUES,
            IntensityFamily.STANDARD: STANDARD_INTENSITIES,
            IntensityFamily.POLAR_ZONES: POLAR_ZONES,
            IntensityFamily.INTERNATIONAL: INTERNATIONAL_COLORS,
        }[self.family]
        if self.value not in allowed:
            raise ValueError(
                f"{self.value!r} is not a valid {self.family.value} intensity"
            )

    @property
    def key(self) -> str:
        """Key used for this tag in WorkoutSummary.intensity_distances."""
        if self.family == IntensityFamily.HEART_RATE:
            return f"HR{self.value}"
        if self.family == IntensityFamily.HEART_RATE_BY_10:
            return f"HR{self.value}0"
        return str(self.value)


# ---------------------------------------------------------------------------
# Parse results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParsedSegment:
    """One resolved piece of distance, after multipliers are applied."""
    distance: int
    stroke: StrokeName = StrokeName.FREESTYLE
    stroke_type: StrokeType = StrokeType.NORMAL
    intensity: Optional[IntensityTag] = None

    def __post_init__(self) -> None:
        if self.distance < 0:
            raise ValueError("Segment distance cannot be negative")


def _zeroed(keys) -> dict:
    return {key: 0 for key in keys}


@dataclass
class WorkoutSummary:
    """
    Aggregate distance for a whole workout.

    total_distance always equals the sum of stroke_distances and the sum of
    stroke_type_distances. intensity_distances only covers distance that
    carried an intensity marker, so it can add up to less.
    """
    total_distance: int = 0
    stroke_distances: dict[StrokeName, int] = field(
        default_factory=lambda: _zeroed(StrokeName)
    )
    intensity_distances: dict[str, int] = field(default_factory=dict)
    stroke_type_distances: dict[StrokeType, int] = field(
        default_factory=lambda: _zeroed(StrokeType)
    )

    def add(self, segment: ParsedSegment) -> None:
        """Fold one resolved segment into the running totals."""
        if segment.distance <= 0:
            return
        self.total_distance += segment.distance
        self.stroke_distances[segment.stroke] += segment.distance
        self.stroke_type_distances[segment.stroke_type] += segment.distance
        if segment.intensity is not None:
            key = segment.intensity.key
            self.intensity_distances[key] = (
                self.intensity_distances.get(key, 0) + segment.distance
            )

    def to_dict(self) -> dict[str, Any]:
        """JSON shape used by the API and the workout log."""
        return {
            "totalDistance": self.total_distance,
            "strokeDistances": {
                stroke.value: distance
                for stroke, distance in self.stroke_distances.items()
            },
            "intensityDistances": dict(self.intensity_distances),
            "strokeTypeDistances": {
                stroke_type.value: distance
                for stroke_type, distance in self.stroke_type_distances.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkoutSummary":
        """Rebuild a summary from its JSON shape, ignoring unknown keys."""
        summary = cls(total_distance=int(data.get("totalDistance", 0)))

        for name, distance in (data.get("strokeDistances") or {}).items():
            try:
                summary.stroke_distances[StrokeName(name)] = int(distance)
            except ValueError:
                continue

        for name, distance in (data.get("strokeTypeDistances") or {}).items():
            try:
                summary.stroke_type_distances[StrokeType(name)] = int(distance)
            except ValueError:
                continue

        summary.intensity_distances = {
            str(key): int(distance)
            for key, distance in (data.get("intensityDistances") or {}).items()
        }
        return summary
