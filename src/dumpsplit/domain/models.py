"""
Pipeline Domain Models

Typed records shared by the scanner components. The filter policy and run
options are pydantic models so configuration is validated before a scan
starts; the per-line records are plain dataclasses.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .enums import Mode, SegmentKind

STDOUT_SENTINEL = "-"


@dataclass(frozen=True)
class Segment:
    """Segment opened by a boundary line."""
    kind: SegmentKind
    entity: str = ""


@dataclass
class HeaderBlock:
    """Leading directive lines, replicated at the top of every output."""
    lines: list[str] = field(default_factory=list)

    def add(self, line: str) -> None:
        self.lines.append(line)

    def render(self) -> str:
        # Buffered lines plus the terminating newline of the block itself
        return "".join(f"{line}\n" for line in self.lines) + "\n"

    def __len__(self) -> int:
        return len(self.lines)


class FilterPolicy(BaseModel):
    """Immutable include/exclude policy for one run."""
    include: frozenset[str] = Field(default_factory=frozenset, description="If non-empty, only these entities pass")
    exclude: frozenset[str] = Field(default_factory=frozenset, description="Entities always dropped")
    exclude_data: frozenset[str] = Field(default_factory=frozenset, description="Entities whose data segments are dropped")
    mode: Mode = Field(default=Mode.BOTH, description="Segment kinds to keep")

    class Config:
        """Pydantic configuration."""
        frozen = True


class RunOptions(BaseModel):
    """Runtime options for one split run."""
    dump_path: Path = Field(..., description="Path to the dump; .gz is decompressed on the fly")
    outdir: Optional[Path] = Field(None, description="Directory for per-entity files")
    outfile: Optional[str] = Field(None, description="Single output file, '-' for stdout")
    compress: bool = Field(default=False, description="Gzip every output file")
    policy: FilterPolicy = Field(default_factory=FilterPolicy)

    @model_validator(mode="after")
    def _one_destination(self) -> "RunOptions":
        if (self.outdir is None) == (self.outfile is None):
            raise ValueError("Provide either outfile or outdir (exactly one)")
        return self

    @property
    def single_stream(self) -> bool:
        return self.outfile is not None
