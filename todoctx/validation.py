"""Marker validation and scrubbing for the assembled prompt."""

from __future__ import annotations

import logging

from todoctx.errors import MarkerCountError, PrimaryMarkerMissingError
from todoctx.markers import TODO_MARKER, count_marker_lines

logger = logging.getLogger(__name__)

DEFAULT_MAX_PROMPT_CHARS = 100_000


def validate_marker_count(prompt: str, diff_enabled: bool) -> int:
    """Check the number of TODO marker lines in ``prompt``.

    Without diff mode exactly two are allowed (the instruction and the
    closing call to action); diff output may carry one more.

    Returns:
        The marker line count.

    Raises:
        MarkerCountError: If the count is outside the allowed range.
    """
    count = count_marker_lines(prompt)
    if diff_enabled:
        if count not in (2, 3):
            raise MarkerCountError("2 or 3", count)
    elif count != 2:
        raise MarkerCountError("exactly 2", count)
    return count


def scrub_extra_todo_markers(prompt: str, diff_enabled: bool, primary_marker: str) -> str:
    """Remove stray TODO marker lines from ``prompt``.

    Keeps the first line that equals ``primary_marker`` once trimmed and
    the last line that contains the marker at all; every other marker line
    is dropped. Non-marker lines are untouched. In diff mode the prompt is
    returned as is.

    Raises:
        PrimaryMarkerMissingError: If no line equals ``primary_marker``.
    """
    if diff_enabled:
        return prompt

    lines = prompt.splitlines()
    if not any(line.strip() == primary_marker for line in lines):
        raise PrimaryMarkerMissingError(primary_marker)

    last_marker = max((i for i, line in enumerate(lines) if TODO_MARKER in line), default=-1)

    out: list[str] = []
    primary_kept = False
    for i, line in enumerate(lines):
        if TODO_MARKER not in line:
            out.append(line)
        elif i == last_marker:
            out.append(line)
        elif line.strip() == primary_marker and not primary_kept:
            out.append(line)
            primary_kept = True

    dropped = len(lines) - len(out)
    if dropped:
        logger.debug("Scrubbed %d extra marker line(s)", dropped)
    return "\n".join(out)


def check_prompt_length(prompt: str, max_chars: int = DEFAULT_MAX_PROMPT_CHARS) -> str | None:
    """Return a warning when ``prompt`` is longer than ``max_chars``, else None."""
    length = len(prompt)
    if length > max_chars:
        return (
            f"Prompt is {length:,} characters, over the {max_chars:,} character limit; "
            "consider --singular, --tgtd or --exclude."
        )
    return None
