"""Source-tree scanning schemas.

Defines the models shared by the reference scanner, the definition
finder and the marker utilities: source files, the target symbol,
per-file scan decisions and the de-duplicated candidate set.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ScanOutcome(StrEnum):
    """Which path decided whether a file references the target symbol."""

    STRUCTURAL = "structural"
    FALLBACK = "fallback"
    SKIPPED = "skipped"


class SourceFile(BaseModel):
    """A supported source file read from disk for a single processing step."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Path of the file as discovered by the walk")
    extension: str = Field(description="Lower-cased extension without the dot")
    content: str = Field(default="", description="Raw UTF-8 file content")

    @classmethod
    def read(cls, path: Path | str) -> SourceFile:
        """Read ``path`` as UTF-8.

        Raises:
            OSError: If the file cannot be opened.
            UnicodeDecodeError: If the content is not valid UTF-8.
        """
        path = Path(path)
        return cls(
            path=str(path),
            extension=path.suffix.lstrip(".").lower(),
            content=path.read_text(encoding="utf-8"),
        )


class TargetSymbol(BaseModel):
    """The symbol a run searches references for; identity is its text."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Symbol name")
    source_path: str = Field(default="", description="File the name was derived from")


class MarkerSpan(BaseModel):
    """Line range opened by ``// v`` and closed by ``// ^`` in one file."""

    model_config = ConfigDict(frozen=True)

    start_line: int = Field(ge=0, description="Index of the opening marker line")
    end_line: int = Field(ge=0, description="Index of the closing marker line, or last line")
    closed: bool = Field(default=True, description="Whether a closing marker was seen")

    def contains(self, line_index: int) -> bool:
        """Whether a line lies strictly between the markers.

        The marker lines themselves are outside. An unclosed span runs to
        the end of the file.
        """
        if line_index <= self.start_line:
            return False
        return not self.closed or line_index < self.end_line


class FileMatch(BaseModel):
    """Scanner decision for a single candidate file."""

    path: str = Field(description="File path")
    outcome: ScanOutcome = Field(description="Decision path that ran")
    referenced: bool = Field(default=False, description="Whether the symbol was found")


class CandidateSet(BaseModel):
    """Every decision made during one scan, de-duplicated by path.

    Append-only: a path that was already decided is never re-added.
    """

    symbol: str = Field(description="Target symbol name")
    search_root: str = Field(description="Directory the scan was bounded to")
    decisions: list[FileMatch] = Field(default_factory=list)

    _seen: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._seen = {d.path for d in self.decisions}

    def add(self, match: FileMatch) -> bool:
        """Record a decision. Returns False if the path was already decided."""
        if match.path in self._seen:
            return False
        self._seen.add(match.path)
        self.decisions.append(match)
        return True

    @property
    def paths(self) -> list[str]:
        """Sorted paths of files that reference the symbol."""
        return sorted(d.path for d in self.decisions if d.referenced)

    def outcome_for(self, path: str) -> ScanOutcome | None:
        for d in self.decisions:
            if d.path == path:
                return d.outcome
        return None

    def __len__(self) -> int:
        return sum(1 for d in self.decisions if d.referenced)
