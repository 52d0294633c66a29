"""
Dump Splitter Pipeline Components

Line Source -> Segment Classifier -> Filter Evaluator -> Output Router,
driven by the DumpScanner.

Components:
- source: LineSource and open_dump for (gzipped) dump intake
- classifier: SegmentClassifier for boundary and entity detection
- filtering: should_ignore policy decision
- router: SingleStreamRouter and EntityFileRouter destinations
- scanner: DumpScanner drive loop and split_dump entry point
"""

from .classifier import SegmentClassifier, extract_entity, is_header
from .filtering import should_ignore
from .router import EntityFileRouter, OutputRouter, SingleStreamRouter, create_router
from .scanner import DumpScanner, ScanContext, split_dump
from .source import LineSource, open_dump

__all__ = [
    "LineSource", "open_dump",
    "SegmentClassifier", "extract_entity", "is_header",
    "should_ignore",
    "OutputRouter", "SingleStreamRouter", "EntityFileRouter", "create_router",
    "DumpScanner", "ScanContext", "split_dump",
]
