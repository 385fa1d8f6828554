"""
Keyword classifiers for workout text.

Each classifier maps a fragment of workout text to a category using ordered
substring rules. The rules are deliberately loose ("fr", "k", "dr") because
swimmers abbreviate heavily; the first matching rule wins, so order matters.
All functions are pure and total over any string.
"""

import re
from typing import Optional, Union

from .models import (
    HEART_RATE_BY_10_VALUES,
    HEART_RATE_VALUES,
    INTERNATIONAL_COLORS,
    POLAR_ZONES,
    STANDARD_INTENSITIES,
    IntensityFamily,
    IntensitySystem,
    IntensityTag,
    StrokeName,
    StrokeType,
)


STROKE_RULES: tuple[tuple[tuple[str, ...], StrokeName], ...] = (
    (("fr", "free"), StrokeName.FREESTYLE),
    (("bk", "back"), StrokeName.BACKSTROKE),
    (("br", "breast"), StrokeName.BREASTSTROKE),
    (("fl", "fly", "butterfly"), StrokeName.BUTTERFLY),
    (("im", "medley"), StrokeName.IM),
    (("ch", "choice"), StrokeName.CHOICE),
)

STROKE_TYPE_RULES: tuple[tuple[tuple[str, ...], StrokeType], ...] = (
    (("drill", "dr"), StrokeType.DRILL),
    (("kick", "k"), StrokeType.KICK),
    (("scull",), StrokeType.SCULL),
)

_HEART_RATE_PATTERN = re.compile(r"hr(\d{3})", re.IGNORECASE)
_HEART_RATE_BY_10_PATTERN = re.compile(r"hr(\d{2})", re.IGNORECASE)

_COLOR_VOCABULARIES = {
    IntensitySystem.POLAR: (IntensityFamily.POLAR_ZONES, POLAR_ZONES),
    IntensitySystem.INTERNATIONAL: (IntensityFamily.INTERNATIONAL, INTERNATIONAL_COLORS),
}


def detect_stroke(fragment: str) -> StrokeName:
    """Return the stroke named in the fragment, defaulting to freestyle."""
    text = fragment.lower()
    for keywords, stroke in STROKE_RULES:
        if any(keyword in text for keyword in keywords):
            return stroke
    return StrokeName.FREESTYLE


def detect_stroke_type(fragment: str) -> StrokeType:
    """Return the stroke modifier (drill, kick, scull) or normal."""
    text = fragment.lower()
    for keywords, stroke_type in STROKE_TYPE_RULES:
        if any(keyword in text for keyword in keywords):
            return stroke_type
    return StrokeType.NORMAL


def detect_intensity(
    fragment: str,
    system: Union[IntensitySystem, str],
) -> Optional[IntensityTag]:
    """
    Find the intensity marker in a fragment.

    Resolution order:
    1. hr### heart rate, only for the enumerated values
    2. hr## heart rate in tens
    3. standard words (easy, moderate, strong, fast)
    4. colour words from the selected vocabulary only

    Returns None when nothing matches.
    """
    system = IntensitySystem.coerce(system)
    text = fragment.lower()

    match = _HEART_RATE_PATTERN.search(fragment)
    if match and int(match.group(1)) in HEART_RATE_VALUES:
        return IntensityTag(IntensityFamily.HEART_RATE, int(match.group(1)))

    match = _HEART_RATE_BY_10_PATTERN.search(fragment)
    if match and int(match.group(1)) in HEART_RATE_BY_10_VALUES:
        return IntensityTag(IntensityFamily.HEART_RATE_BY_10, int(match.group(1)))

    for word in STANDARD_INTENSITIES:
        if word in text:
            return IntensityTag(IntensityFamily.STANDARD, word)

    family, colors = _COLOR_VOCABULARIES[system]
    for color in colors:
        if color in text:
            return IntensityTag(family, color)

    return None
