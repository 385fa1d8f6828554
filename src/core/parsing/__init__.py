"""
Free-text swim workout parsing.

Contains the keyword classifiers, the bracket-group and plain-line parsers,
and the line-by-line state machine that builds a WorkoutSummary.
"""

from .classifiers import detect_intensity, detect_stroke, detect_stroke_type
from .groups import GroupResult, GroupSegment, parse_group
from .lines import LineResult, parse_plain_line
from .models import (
    IntensityFamily,
    IntensitySystem,
    IntensityTag,
    InvalidInputError,
    ParsedSegment,
    StrokeName,
    StrokeType,
    UnterminatedGroupError,
    WorkoutParseError,
    WorkoutSummary,
)
from .parser import WorkoutParser, parse_workout_segments, parse_workout_text

__all__ = [
    "detect_intensity",
    "detect_stroke",
    "detect_stroke_type",
    "GroupResult",
    "GroupSegment",
    "parse_group",
    "LineResult",
    "parse_plain_line",
    "IntensityFamily",
    "IntensitySystem",
    "IntensityTag",
    "InvalidInputError",
    "ParsedSegment",
    "StrokeName",
    "StrokeType",
    "UnterminatedGroupError",
    "WorkoutParseError",
    "WorkoutSummary",
    "WorkoutParser",
    "parse_workout_segments",
    "parse_workout_text",
]
