"""
Output Router - Destination Lifecycle

Owns every output handle of a run. Two strategies:

- SingleStreamRouter: one file (or stdout) for the whole run, opened on the
  first kept segment and written with the header block first.
- EntityFileRouter: one ``<entity>.sql`` file per table or view under an
  output directory. A file is created fresh the first time its entity is seen
  and reopened for append when a later segment (e.g. data after schema) comes
  back to it. Only one entity file is open at any time.

With compression, each file is wrapped in a gzip stream; appending to a
compressed file adds a new gzip member, which gzip readers concatenate.
"""

from __future__ import annotations

import gzip
import logging
import sys
from pathlib import Path
from typing import IO, Optional

from ..config.settings import Config
from ..domain.models import STDOUT_SENTINEL, HeaderBlock, RunOptions
from ..types import OutputError
from ..utils import ensure_directory
from .source import ENCODING, ENCODING_ERRORS, GZIP_SUFFIX

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\r\n"
ENTITY_SUFFIX = ".sql"


class OutputRouter:
    """
    Base class holding the currently open destination.

    Parameters
    ----------
    compress : bool
        Wrap output files in gzip.
    compress_level : int
        Gzip compression level (1-9).
    """

    def __init__(self, *, compress: bool = False, compress_level: int = 6) -> None:
        self.header = HeaderBlock()
        self.files_created = 0
        self._compress = compress
        self._compress_level = int(compress_level)
        self._raw: Optional[IO[bytes]] = None
        self._out: Optional[IO[bytes]] = None
        self._path: str = ""

    # --- lifecycle ---

    @property
    def is_open(self) -> bool:
        return self._out is not None

    def open(self, entity: str) -> None:
        """Make the destination for a segment of ``entity`` current."""
        raise NotImplementedError

    def write(self, line: str) -> None:
        """Append one line and a CRLF terminator to the open destination."""
        if self._out is None:
            raise RuntimeError("write() called with no open destination")
        self._write_bytes(line.encode(ENCODING, ENCODING_ERRORS) + LINE_TERMINATOR)

    def close(self) -> None:
        """Flush and release the open destination."""
        self._close_current()

    def __enter__(self) -> "OutputRouter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- helpers ---

    def _attach(self, raw: IO[bytes], path: str, gzip_name: Optional[str] = None) -> None:
        self._raw = raw
        self._path = path
        if self._compress:
            # mtime=0 keeps repeated runs byte-identical
            self._out = gzip.GzipFile(
                filename=gzip_name,
                mode="wb",
                compresslevel=self._compress_level,
                fileobj=raw,
                mtime=0,
            )
        else:
            self._out = raw

    def _write_bytes(self, data: bytes) -> None:
        try:
            self._out.write(data)
        except OSError as e:
            raise OutputError(self._path, e) from e

    def _write_prologue(self) -> None:
        self._write_bytes(self.header.render().encode(ENCODING, ENCODING_ERRORS))

    def _release_raw(self, raw: IO[bytes]) -> None:
        raw.close()

    def _close_current(self) -> None:
        out, raw, path = self._out, self._raw, self._path
        self._out = None
        self._raw = None
        if out is None:
            return
        try:
            if out is not raw:
                out.close()  # gzip trailer before the file itself
        except OSError as e:
            raise OutputError(path, e) from e
        finally:
            try:
                self._release_raw(raw)
            except OSError as e:
                raise OutputError(path, e) from e
        logger.debug(f"Closed {path}")


class SingleStreamRouter(OutputRouter):
    """All kept segments go to one file, or to stdout for ``-``."""

    def __init__(self, target: str, *, compress: bool = False, compress_level: int = 6) -> None:
        super().__init__(compress=compress, compress_level=compress_level)
        self.target = target

    def open(self, entity: str = "") -> None:
        if self._out is not None:
            return

        if self.target == STDOUT_SENTINEL:
            self._attach(sys.stdout.buffer, "<stdout>", gzip_name="")
        else:
            try:
                raw = open(self.target, "wb")
            except OSError as e:
                raise OutputError(self.target, e) from e
            self._attach(raw, self.target)
            self.files_created += 1
            logger.debug(f"Created {self.target}")

        self._write_prologue()

    def _release_raw(self, raw: IO[bytes]) -> None:
        if self.target == STDOUT_SENTINEL:
            raw.flush()
        else:
            raw.close()


class EntityFileRouter(OutputRouter):
    """One file per entity under ``outdir``."""

    def __init__(
        self,
        outdir: Path,
        *,
        compress: bool = False,
        compress_level: int = 6,
        dir_mode: int = 0o700,
    ) -> None:
        super().__init__(compress=compress, compress_level=compress_level)
        self.outdir = Path(outdir)
        self.entities: list[str] = []
        self._dir_mode = dir_mode
        self._dir_ready = False
        self._created: set[str] = set()
        self._current: Optional[str] = None

    def path_for(self, entity: str) -> Path:
        name = f"{entity}{ENTITY_SUFFIX}"
        if self._compress:
            name += GZIP_SUFFIX
        return self.outdir / name

    def open(self, entity: str) -> None:
        if self._out is not None and self._current == entity:
            return

        self._close_current()
        self._current = None
        self._ensure_outdir()

        path = self.path_for(entity)
        fresh = entity not in self._created
        try:
            raw = open(path, "wb" if fresh else "ab")
        except OSError as e:
            raise OutputError(str(path), e) from e

        self._attach(raw, str(path))
        self._current = entity

        if fresh:
            self._created.add(entity)
            self.entities.append(entity)
            self.files_created += 1
            logger.debug(f"Created {path}")
            self._write_prologue()
        else:
            logger.debug(f"Appending to {path}")

    def _ensure_outdir(self) -> None:
        if self._dir_ready:
            return
        try:
            ensure_directory(self.outdir, mode=self._dir_mode)
        except OSError as e:
            raise OutputError(str(self.outdir), e) from e
        self._dir_ready = True


def create_router(options: RunOptions, settings: Config) -> OutputRouter:
    """Pick the router for the destination selected in ``options``."""
    if options.single_stream:
        return SingleStreamRouter(
            options.outfile,
            compress=options.compress,
            compress_level=settings.output.compress_level,
        )
    return EntityFileRouter(
        options.outdir,
        compress=options.compress,
        compress_level=settings.output.compress_level,
        dir_mode=settings.output.dir_mode,
    )
