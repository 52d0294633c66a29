"""
Domain Models and Types

Core records and enumerations used by the scanner components.

Models:
- Segment: kind and entity opened by a boundary line
- HeaderBlock: captured leading directive lines
- FilterPolicy: include/exclude/mode policy for a run
- RunOptions: destination and flags for a run

Enums:
- SegmentKind: header, schema, view, data
- Mode: data, schema, both
- ScanState: drive loop states
"""

from .enums import Mode, ScanState, SegmentKind
from .models import STDOUT_SENTINEL, FilterPolicy, HeaderBlock, RunOptions, Segment

__all__ = [
    "Segment", "HeaderBlock", "FilterPolicy", "RunOptions", "STDOUT_SENTINEL",
    "Mode", "ScanState", "SegmentKind"
]
