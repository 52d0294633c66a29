"""
Dump Scanner - Drive Loop

Reads content lines from a LineSource, captures the leading header block,
classifies boundary lines, applies the filter policy once per segment and
routes kept lines to the OutputRouter.

States: AWAITING_HEADER -> SCANNING_BODY -> DONE. Outputs are closed on every
exit path; a failure while closing after another error is logged, not raised,
so the first error reaches the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.settings import Config
from ..domain.enums import ScanState, SegmentKind
from ..domain.models import FilterPolicy, RunOptions, Segment
from ..types import OutputError, ScanStats
from ..utils import timer
from .classifier import SegmentClassifier, is_header
from .filtering import should_ignore
from .router import EntityFileRouter, OutputRouter, create_router
from .source import LineSource, open_dump

logger = logging.getLogger(__name__)


@dataclass
class ScanContext:
    """Running classification of the current line."""
    kind: Optional[SegmentKind] = None
    entity: str = ""
    ignore: bool = False
    state: ScanState = ScanState.AWAITING_HEADER

    @property
    def in_segment(self) -> bool:
        return self.kind is not None

    def enter(self, segment: Segment, ignore: bool) -> None:
        self.kind = segment.kind
        self.entity = segment.entity
        self.ignore = ignore


class DumpScanner:
    """
    Single-pass segmentation of one dump.

    Usage:
        scanner = DumpScanner(source, router, policy)
        stats = scanner.run()
    """

    def __init__(
        self,
        source: LineSource,
        router: OutputRouter,
        policy: FilterPolicy,
        classifier: Optional[SegmentClassifier] = None,
    ) -> None:
        self.source = source
        self.router = router
        self.policy = policy
        self.classifier = classifier or SegmentClassifier()
        self.context = ScanContext()
        self.stats = ScanStats()

    def run(self) -> ScanStats:
        """Scan the whole input; outputs are closed before returning or raising."""
        try:
            self._capture_header()
            self._scan_body()
        except BaseException:
            self._close_quietly()
            raise
        finally:
            self.context.state = ScanState.DONE
            self.stats.lines_read = self.source.line_number

        self.router.close()
        self.stats.files_created = self.router.files_created
        return self.stats

    # --- states ---

    def _capture_header(self) -> None:
        for line in self.source:
            if not is_header(line):
                self.source.push_back(line)
                break
            self.router.header.add(line)
        logger.debug(f"Captured {len(self.router.header)} header lines")
        self.context.state = ScanState.SCANNING_BODY

    def _scan_body(self) -> None:
        ctx = self.context
        for line in self.source:
            segment = self.classifier.classify(line, self.source.line_number)
            if segment is not None:
                self._start_segment(segment)
                if ctx.ignore:
                    continue
            elif not ctx.in_segment and not self._preamble_destination():
                continue

            if not ctx.ignore:
                self.router.write(line)
                self.stats.lines_written += 1

    def _start_segment(self, segment: Segment) -> None:
        ignore = should_ignore(segment.kind, segment.entity, self.policy)
        self.context.enter(segment, ignore)

        if ignore:
            self.stats.segments_ignored += 1
            logger.debug(f'Ignoring {segment.kind.value} for "{segment.entity}"')
            return

        self.stats.segments_started += 1
        if segment.entity not in self.stats.entities:
            self.stats.entities.append(segment.entity)
        logger.debug(f'Start {segment.kind.value} for "{segment.entity}"')
        self.router.open(segment.entity)

    def _preamble_destination(self) -> bool:
        """
        Body lines before the first boundary.

        A single stream takes them; per-entity output has nowhere to put them.
        """
        if isinstance(self.router, EntityFileRouter):
            if self.stats.preamble_lines == 0:
                logger.warning(
                    f"Line {self.source.line_number} precedes the first table or view "
                    f"and is not written to any entity file"
                )
            self.stats.preamble_lines += 1
            return False
        self.router.open("")
        return True

    def _close_quietly(self) -> None:
        try:
            self.router.close()
        except OutputError as e:
            logger.warning(f"Failed to close output after error: {e}")


@timer
def split_dump(options: RunOptions, settings: Config) -> ScanStats:
    """
    Split one dump according to ``options``.

    Args:
        options: Destination, flags and filter policy
        settings: Environment settings (line ceiling, gzip level, directory mode)

    Returns:
        Counters for the run

    Raises:
        DumpSplitError: On any read, output or malformed-boundary failure
    """
    with create_router(options, settings) as router, \
            open_dump(options.dump_path, settings.reader.read_buffer_bytes) as stream:
        source = LineSource(stream, settings.reader.max_line_bytes)
        scanner = DumpScanner(source, router, options.policy)
        return scanner.run()
