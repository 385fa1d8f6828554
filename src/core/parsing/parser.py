"""
Workout text parser.

Walks a free-text swim workout line by line and turns it into a
WorkoutSummary. The walk is a small state machine:

- IDLE: plain lines are parsed directly; a bare multiplier line (``3x``)
  is remembered and applied to whatever comes next.
- COLLECTING: a bracket group has been opened and its body is being
  buffered until a closing bracket shows up.

Example:

    3x
    (50 fly + 50 back)
    4x100 free hr160

is 300 metres of group work plus 400 metres of freestyle at HR160.

The parser is pure: no I/O, no shared state, safe to call from any thread.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .groups import find_closing_bracket, find_opening_bracket, parse_group
from .lines import parse_plain_line
from .models import (
    IntensitySystem,
    InvalidInputError,
    ParsedSegment,
    UnterminatedGroupError,
    WorkoutSummary,
)

logger = logging.getLogger(__name__)


_BARE_MULTIPLIER = re.compile(r"^(\d{1,9})\s*[x×*]\s*$", re.IGNORECASE)
_LEADING_MULTIPLIER = re.compile(r"^(\d{1,9})\s*[x×*]", re.IGNORECASE)
_INLINE_MULTIPLIER = re.compile(r"^(\d{1,9})\s*[x×*](?!\s*$)", re.IGNORECASE)


class ParserState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


@dataclass
class _Walk:
    """Mutable state for one pass over the text."""
    system: IntensitySystem
    state: ParserState = ParserState.IDLE
    pending_multiplier: int = 1
    group_multiplier: int = 1
    group_opened_on: int = 0
    buffer: list[str] = field(default_factory=list)
    segments: list[ParsedSegment] = field(default_factory=list)

    def open_group(self, line: str, line_number: int) -> None:
        leading = _LEADING_MULTIPLIER.match(line)
        if leading:
            self.group_multiplier = int(leading.group(1))
        else:
            self.group_multiplier = self.pending_multiplier
        self.pending_multiplier = 1
        self.group_opened_on = line_number
        self.state = ParserState.COLLECTING
        # Text in front of the bracket ("4x", "warm up") is not group content.
        self.buffer = [line[find_opening_bracket(line):]]

    def close_group(self, tail: str) -> None:
        self.buffer.append(tail)
        group = parse_group("\n".join(self.buffer))
        for part in group.segments:
            self.segments.append(ParsedSegment(
                distance=part.distance * self.group_multiplier,
                stroke=part.stroke,
                stroke_type=part.stroke_type,
            ))
        self.buffer = []
        self.group_multiplier = 1
        self.state = ParserState.IDLE

    def plain_line(self, line: str) -> None:
        if _INLINE_MULTIPLIER.match(line):
            # The line carries its own repetitions.
            self.pending_multiplier = 1
        parsed = parse_plain_line(line, self.system)
        multiplier = self.pending_multiplier
        self.pending_multiplier = 1

        for stroke, distance in parsed.stroke_distances.items():
            if distance > 0:
                self.segments.append(ParsedSegment(
                    distance=distance * multiplier,
                    stroke=stroke,
                    stroke_type=parsed.stroke_type,
                    intensity=parsed.intensity,
                ))


def _is_bracketed_note(text: str) -> bool:
    """
    True for a group that closes on the same line without any distance,
    e.g. the ``(board)`` in ``200 kick (board)``.
    """
    closing = find_closing_bracket(text)
    return closing != -1 and parse_group(text[:closing]).distance == 0


def _validate(text: object, system: Union[IntensitySystem, str]) -> IntensitySystem:
    if not isinstance(text, str):
        raise InvalidInputError(
            f"Workout text must be a string, got {type(text).__name__}"
        )
    return IntensitySystem.coerce(system)


def parse_workout_segments(
    text: str,
    system: Union[IntensitySystem, str],
    *,
    strict: bool = False,
) -> list[ParsedSegment]:
    """
    Resolve workout text into an ordered list of multiplied segments.

    Raises InvalidInputError for a non-string text or unknown vocabulary,
    and UnterminatedGroupError in strict mode when a group never closes.
    """
    walk = _Walk(system=_validate(text, system))

    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue

        if walk.state == ParserState.COLLECTING:
            closing = find_closing_bracket(line)
            if closing == -1:
                walk.buffer.append(line)
            else:
                walk.close_group(line[:closing])
            continue

        bare = _BARE_MULTIPLIER.match(line)
        if bare:
            walk.pending_multiplier = int(bare.group(1))
            continue

        opening = find_opening_bracket(line)
        if opening != -1:
            if _is_bracketed_note(line[opening:]):
                walk.plain_line(line)
                continue
            walk.open_group(line, line_number)
            closing = find_closing_bracket(walk.buffer[0])
            if closing != -1:
                group_line = walk.buffer.pop()
                walk.close_group(group_line[:closing])
            continue

        walk.plain_line(line)

    if walk.state == ParserState.COLLECTING:
        if strict:
            raise UnterminatedGroupError(walk.group_opened_on)
        logger.warning(
            "Discarding unterminated bracket group",
            extra={
                "line_number": walk.group_opened_on,
                "buffered_lines": len(walk.buffer),
            }
        )

    return walk.segments


def parse_workout_text(
    text: str,
    system: Union[IntensitySystem, str],
    *,
    strict: bool = False,
) -> WorkoutSummary:
    """Parse workout text into a WorkoutSummary."""
    summary = WorkoutSummary()
    for segment in parse_workout_segments(text, system, strict=strict):
        summary.add(segment)

    logger.debug(
        "Parsed workout",
        extra={
            "total_distance": summary.total_distance,
            "intensity_keys": sorted(summary.intensity_distances),
        }
    )
    return summary


class WorkoutParser:
    """
    Parser with a configured default vocabulary and strictness.

    The API and any in-process caller (e.g. a live preview) share this one
    implementation.
    """

    def __init__(
        self,
        default_system: Union[IntensitySystem, str] = IntensitySystem.POLAR,
        strict: bool = False,
    ) -> None:
        self.default_system = IntensitySystem.coerce(default_system)
        self.strict = strict

    def parse(
        self,
        text: str,
        system: Optional[Union[IntensitySystem, str]] = None,
    ) -> WorkoutSummary:
        return parse_workout_text(
            text,
            self.default_system if system is None else system,
            strict=self.strict,
        )

    def parse_segments(
        self,
        text: str,
        system: Optional[Union[IntensitySystem, str]] = None,
    ) -> list[ParsedSegment]:
        return parse_workout_segments(
            text,
            self.default_system if system is None else system,
            strict=self.strict,
        )
