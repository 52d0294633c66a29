"""
Line Source - Dump Intake

Opens a dump (transparently gunzipping ``.gz`` files) and exposes it as a
sequence of text lines with a 1-based line counter and a one-slot pushback.

Lines are decoded as UTF-8 with ``surrogateescape`` so that any byte sequence
found in a dump survives the trip back to disk unchanged.
"""

from __future__ import annotations

import gzip
import logging
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Generator, Iterator, Optional

from ..config.settings import DEFAULT_MAX_LINE_BYTES, DEFAULT_READ_BUFFER_BYTES
from ..types import DumpReadError, InputError, LineTooLongError

logger = logging.getLogger(__name__)

GZIP_SUFFIX = ".gz"
COMMENT_MARKER = "--"
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def is_compressed(path: str | Path) -> bool:
    """Compression is detected from the file name only."""
    return str(path).endswith(GZIP_SUFFIX)


@contextmanager
def open_dump(path: str | Path, buffer_size: int = DEFAULT_READ_BUFFER_BYTES) -> Generator[IO[bytes], None, None]:
    """
    Context manager yielding a readable binary stream for the dump.

    - ``*.gz``: gzip.open(..., 'rb')
    - anything else: open() in 'rb'

    Raises:
        InputError: If the file cannot be opened
    """
    try:
        if is_compressed(path):
            f = gzip.open(path, "rb")
        else:
            f = open(path, "rb", buffering=buffer_size)
    except OSError as e:
        raise InputError(str(path), e) from e

    logger.debug(f"Opened dump {path} (compressed={is_compressed(path)})")
    try:
        yield f
    finally:
        f.close()


class LineSource:
    """
    Lazy, finite, non-restartable line reader over a binary stream.

    Parameters
    ----------
    stream : IO[bytes]
        Binary stream positioned at the start of the dump.
    max_line_bytes : int
        Longest accepted line (without terminator). Longer lines raise
        LineTooLongError instead of being truncated.
    """

    def __init__(self, stream: IO[bytes], max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> None:
        self._stream = stream
        self._max_line_bytes = int(max_line_bytes)
        self._pushed: Optional[str] = None
        self.line_number = 0

    # --- raw reading ---

    def read_line(self) -> Optional[str]:
        """
        Read the next physical line, stripped of ``\\n`` and a preceding ``\\r``.

        Returns None at end of input.

        Raises:
            LineTooLongError: If the line exceeds max_line_bytes
            DumpReadError: On any failure of the underlying stream
        """
        try:
            raw = self._stream.readline(self._max_line_bytes + 1)
        except (OSError, EOFError, zlib.error) as e:
            raise DumpReadError(self.line_number + 1, e) from e

        if not raw:
            return None

        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        elif len(raw) > self._max_line_bytes:
            raise LineTooLongError(self.line_number + 1, self._max_line_bytes)
        elif raw.endswith(b"\r"):
            # final line without a newline
            raw = raw[:-1]

        self.line_number += 1
        return raw.decode(ENCODING, ENCODING_ERRORS)

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.next_content_line()
            if line is None:
                return
            yield line

    # --- content lines with pushback ---

    def next_content_line(self) -> Optional[str]:
        """
        Return the next line that is neither blank nor a ``--`` comment.

        A pushed-back line is returned first, without being read or counted
        again.
        """
        if self._pushed is not None:
            line, self._pushed = self._pushed, None
            return line

        while True:
            line = self.read_line()
            if line is None:
                return None
            if line == "" or line.startswith(COMMENT_MARKER):
                continue
            return line

    def push_back(self, line: str) -> None:
        """Return a consumed line to the source so it is read again next."""
        if self._pushed is not None:
            raise RuntimeError("LineSource supports a single pushed-back line")
        self._pushed = line
