"""
Pipeline Enumerations

Core enums for the segment model and the output mode filter.
"""

from enum import Enum


class SegmentKind(str, Enum):
    """Kind of logical unit a run of dump lines belongs to."""
    HEADER = "header"   # Leading /*! directive block
    SCHEMA = "schema"   # DROP TABLE / CREATE TABLE
    VIEW = "view"       # /*!50001 DROP VIEW ... view definition
    DATA = "data"       # LOCK TABLES / INSERT / UNLOCK TABLES


class Mode(str, Enum):
    """Which segment kinds a run keeps."""
    DATA = "data"       # Only table data (views still pass)
    SCHEMA = "schema"   # Only table schema (views still pass)
    BOTH = "both"       # Everything not excluded by name


class ScanState(str, Enum):
    """States of the drive loop."""
    AWAITING_HEADER = "awaiting_header"
    SCANNING_BODY = "scanning_body"
    DONE = "done"
