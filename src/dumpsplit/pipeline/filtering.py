"""
Filter Evaluator

Decides, once per segment, whether its lines are written or dropped.
"""

from __future__ import annotations

from ..domain.enums import Mode, SegmentKind
from ..domain.models import FilterPolicy


def should_ignore(kind: SegmentKind, entity: str, policy: FilterPolicy) -> bool:
    """
    Return True if a segment of ``kind`` for ``entity`` is dropped.

    Views are only subject to the name-based rules; mode distinguishes
    schema from data.
    """
    if policy.include and entity not in policy.include:
        return True
    if entity in policy.exclude:
        return True
    if kind == SegmentKind.DATA and policy.mode == Mode.SCHEMA:
        return True
    if kind == SegmentKind.SCHEMA and policy.mode == Mode.DATA:
        return True
    if kind == SegmentKind.DATA and entity in policy.exclude_data:
        return True
    return False
