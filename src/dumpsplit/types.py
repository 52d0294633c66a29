"""
Type definitions and the error hierarchy for the dump splitter.

Every fatal condition of a run surfaces as a ``DumpSplitError`` subclass so the
CLI can report it and exit non-zero without a traceback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ScanStats:
    """Counters collected while scanning one dump."""
    lines_read: int = 0
    segments_started: int = 0
    segments_ignored: int = 0
    lines_written: int = 0
    files_created: int = 0
    preamble_lines: int = 0  # body lines seen before any boundary with no destination
    entities: list[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"{self.lines_read} lines read, {self.lines_written} written, "
            f"{self.segments_started} segments kept, {self.segments_ignored} ignored, "
            f"{self.files_created} files created"
        )


class DumpSplitError(Exception):
    """Base exception for dump splitting failures."""
    pass


class ConfigurationError(DumpSplitError):
    """Raised when configuration is invalid or incomplete."""
    pass


class DumpReadError(DumpSplitError):
    """Failure while reading the input dump."""
    def __init__(self, line_number: int, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.line_number = line_number
        self.cause = cause
        detail = message or str(cause)
        super().__init__(f"At line {line_number}: {detail}")


class LineTooLongError(DumpReadError):
    """A single line exceeded the configured maximum line size."""
    def __init__(self, line_number: int, max_line_bytes: int):
        self.max_line_bytes = max_line_bytes
        super().__init__(line_number, message=f"line exceeds maximum size of {max_line_bytes} bytes")


class MalformedBoundaryError(DumpSplitError):
    """A boundary line does not carry a backtick-quoted entity name."""
    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        preview = line if len(line) <= 80 else line[:77] + "..."
        super().__init__(f"At line {line_number}: cannot extract entity name from {preview!r}")


class OutputError(DumpSplitError):
    """Failure creating, opening or writing an output destination."""
    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Output error on {path}: {cause}")


class InputError(DumpSplitError):
    """The dump could not be opened."""
    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot open dump {path}: {cause}")
