"""
Plain-line parsing.

A plain line is any workout line without brackets, e.g. ``4x100 free hr160``
or ``200 + 200 back easy``. Its distance is the sum of the numeric tokens;
stroke, stroke type and intensity come from keyword scans over the whole line.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from .classifiers import detect_intensity, detect_stroke, detect_stroke_type
from .models import IntensitySystem, IntensityTag, StrokeName, StrokeType


_TOKEN_SEPARATOR = re.compile(r"[\s+]+")
_REPEAT_TOKEN = re.compile(r"^(\d{1,9})[x×*](\d{1,9})$")
_NUMBER_TOKEN = re.compile(r"^\d{1,9}$")


@dataclass(frozen=True)
class LineResult:
    """Distance and classification of a single plain line."""
    distance: int
    stroke_distances: dict[StrokeName, int] = field(default_factory=dict)
    stroke_type: StrokeType = StrokeType.NORMAL
    intensity: Optional[IntensityTag] = None


def line_distance(line: str) -> int:
    """Sum the ``NxD`` and bare-number tokens of a line."""
    distance = 0
    for token in _TOKEN_SEPARATOR.split(line.lower().strip()):
        if not token:
            continue
        repeat = _REPEAT_TOKEN.match(token)
        if repeat:
            distance += int(repeat.group(1)) * int(repeat.group(2))
        elif _NUMBER_TOKEN.match(token):
            distance += int(token)
    return distance


def parse_plain_line(
    line: str,
    system: Union[IntensitySystem, str] = IntensitySystem.POLAR,
) -> LineResult:
    """Parse one bracket-free line. All of its distance goes to one stroke."""
    text = line.lower().strip()
    if not text:
        return LineResult(distance=0)

    distance = line_distance(text)
    stroke_distances = {detect_stroke(text): distance} if distance > 0 else {}

    return LineResult(
        distance=distance,
        stroke_distances=stroke_distances,
        stroke_type=detect_stroke_type(text),
        intensity=detect_intensity(text, system),
    )
