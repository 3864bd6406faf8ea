"""Instruction discovery: which file holds the TODO, and what it says."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from todoctx.context.walk import iter_source_files
from todoctx.errors import AmbiguousInstructionError, InstructionNotFoundError, IOFailureError
from todoctx.markers import TODO_MARKER, TODO_MARKER_WS
from todoctx.schemas.config import DEFAULT_VENDOR_DIRS

logger = logging.getLogger(__name__)


def _contains_marker(path: Path) -> bool:
    try:
        with path.open(encoding="utf-8") as fh:
            return any(TODO_MARKER_WS in line for line in fh)
    except (OSError, UnicodeDecodeError):
        return False


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def find_prompt_instruction(
    search_dir: Path | str,
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
) -> Path:
    """Locate the file carrying the TODO marker.

    When several files carry a marker the most recently modified wins.

    Raises:
        InstructionNotFoundError: If no supported file carries a marker.
        AmbiguousInstructionError: If the chosen file carries more than one.
    """
    matching = [p for p in iter_source_files(Path(search_dir), vendor_dirs) if _contains_marker(p)]
    if not matching:
        raise InstructionNotFoundError(f"No files found containing '{TODO_MARKER_WS}'")

    chosen = max(matching, key=_mtime)
    marker_lines = [
        line.strip()
        for line in chosen.read_text(encoding="utf-8").splitlines()
        if TODO_MARKER_WS in line
    ]
    if len(marker_lines) > 1:
        raise AmbiguousInstructionError(str(chosen), marker_lines)

    logger.debug("Instruction file: %s (%d candidates)", chosen, len(matching))
    return chosen


def locate_instruction_file(
    search_dir: Path | str,
    override: str = "",
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
) -> Path:
    """The instruction file: ``override`` when given, otherwise discovered."""
    if override:
        return Path(override)
    return find_prompt_instruction(search_dir, vendor_dirs)


def extract_instruction_content(path: Path | str) -> str:
    """Return the first TODO marker line of ``path``, left-trimmed.

    Raises:
        InstructionNotFoundError: If the file is missing or has no marker.
        IOFailureError: If the file cannot be read.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InstructionNotFoundError(f"Error opening file {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailureError(f"Error reading file {path}: {exc}") from exc

    for line in content.splitlines():
        if TODO_MARKER in line:
            return line.lstrip()
    raise InstructionNotFoundError(f"No valid TODO instruction found in {path}")
