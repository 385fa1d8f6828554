"""
Bracket-group parsing.

A bracket group is a repeatable composite set such as
``4x(100 fly + 100 free)``. This module only handles the body of one group;
the multiplier in front of it is resolved by the line parser.

``()``, ``[]`` and ``{}`` are interchangeable. Groups do not nest: any inner
bracket characters are stripped along with the outer ones.
"""

import re
from dataclasses import dataclass

from .classifiers import detect_stroke, detect_stroke_type
from .models import StrokeName, StrokeType


OPENING_BRACKETS = "([{"
CLOSING_BRACKETS = ")]}"

_BRACKET_CHARS = re.compile(r"[\(\)\[\]\{\}]")
_SEGMENT_SEPARATOR = re.compile(r"\s*\+\s*")
# Longer digit runs are treated as noise rather than distances.
_LEADING_NUMBER = re.compile(r"^\d{1,9}(?!\d)")


@dataclass(frozen=True)
class GroupSegment:
    """One ``<distance> <stroke>`` piece of a group body, before multiplying."""
    distance: int
    stroke: StrokeName
    stroke_type: StrokeType = StrokeType.NORMAL


@dataclass(frozen=True)
class GroupResult:
    """Parsed body of one bracket group."""
    distance: int
    segments: tuple[GroupSegment, ...] = ()


def find_opening_bracket(text: str) -> int:
    """Index of the first opening bracket in text, or -1."""
    positions = [text.find(char) for char in OPENING_BRACKETS if char in text]
    return min(positions) if positions else -1


def find_closing_bracket(text: str) -> int:
    """Index of the first closing bracket in text, or -1."""
    positions = [text.find(char) for char in CLOSING_BRACKETS if char in text]
    return min(positions) if positions else -1


def parse_group(raw_group_text: str) -> GroupResult:
    """
    Parse the text of one bracket group into distance segments.

    Each non-blank line is split on ``+``; a segment counts only if it starts
    with a number. Anything else in the group is ignored rather than
    reported, so a sloppy group still yields whatever distance it can.
    """
    text = _BRACKET_CHARS.sub("", raw_group_text).strip()
    if not text:
        return GroupResult(distance=0)

    segments: list[GroupSegment] = []

    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue

        for piece in _SEGMENT_SEPARATOR.split(line):
            piece = piece.strip()
            match = _LEADING_NUMBER.match(piece)
            if not match:
                continue

            distance = int(match.group(0))
            if distance > 0:
                segments.append(GroupSegment(
                    distance=distance,
                    stroke=detect_stroke(piece),
                    stroke_type=detect_stroke_type(piece),
                ))

    return GroupResult(
        distance=sum(segment.distance for segment in segments),
        segments=tuple(segments),
    )
