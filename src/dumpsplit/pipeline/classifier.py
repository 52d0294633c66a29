"""
Segment Classifier

Recognises the fixed textual markers mysqldump writes at the start of each
table, view and data section, and extracts the backtick-quoted entity name.
No SQL is parsed: a line either starts with a known marker or it continues
the current segment.
"""

from __future__ import annotations

from typing import Optional

from ..domain.enums import SegmentKind
from ..domain.models import Segment
from ..types import MalformedBoundaryError

HEADER_MARKER = "/*!"

# Evaluated in order, first match wins
BOUNDARY_RULES: tuple[tuple[str, SegmentKind], ...] = (
    ("/*!50001 DROP VIEW", SegmentKind.VIEW),
    ("DROP TABLE", SegmentKind.SCHEMA),
    ("LOCK TABLES", SegmentKind.DATA),
)


def is_header(line: str) -> bool:
    """True for a leading directive comment line."""
    return line.startswith(HEADER_MARKER)


def extract_entity(line: str, line_number: int = 0) -> str:
    """
    Return the text strictly between the first and last backtick of a line.

    Raises:
        MalformedBoundaryError: If the line holds fewer than two backticks
    """
    first = line.find("`")
    last = line.rfind("`")
    if first < 0 or first == last:
        raise MalformedBoundaryError(line_number, line)
    return line[first + 1:last]


class SegmentClassifier:
    """
    Stateless boundary classifier.

    Usage:
        classifier = SegmentClassifier()
        segment = classifier.classify(line, source.line_number)
        if segment is not None:
            ...  # a new segment starts on this line
    """

    def __init__(self, rules: tuple[tuple[str, SegmentKind], ...] = BOUNDARY_RULES) -> None:
        self._rules = rules

    def classify(self, line: str, line_number: int = 0) -> Optional[Segment]:
        """Return the Segment opened by a boundary line, else None."""
        for prefix, kind in self._rules:
            if line.startswith(prefix):
                return Segment(kind=kind, entity=extract_entity(line, line_number))
        return None
