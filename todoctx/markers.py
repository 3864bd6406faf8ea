"""Marker protocol shared by every stage of the prompt pipeline.

A single ``// TODO: - <text>`` line marks the instruction to act on.
Paired ``// v`` / ``// ^`` comment lines mark the regions of a file that
should be kept; everything else is collapsed into a ``// ...`` placeholder.
"""

from __future__ import annotations

from todoctx.schemas.context import MarkerSpan

# Exact form without the trailing space; used for counting marker lines.
TODO_MARKER = "// TODO: -"

# Form with the trailing space; used when locating the instruction.
TODO_MARKER_WS = "// TODO: - "

OPEN_MARKER = "// v"
CLOSE_MARKER = "// ^"
PLACEHOLDER = "// ..."

# Closes every prompt. It quotes TODO_MARKER_WS, which makes it the
# trailing call-to-action marker line.
CTA_INSTRUCTION = (
    "Can you do the TODO:- in the above code? But ignoring all FIXMEs and other "
    "TODOs...i.e. only do the one and only one TODO that is marked by "
    '"// TODO: - ", i.e. ignore things like "// TODO: example" because it '
    "doesn't have the hyphen"
)


def unescape_newlines(text: str) -> str:
    """Convert literal ``\\n`` sequences into real newlines."""
    return text.replace("\\n", "\n")


def todo_index(content: str) -> int | None:
    """Return the index of the first line containing the TODO marker."""
    for i, line in enumerate(content.splitlines()):
        if TODO_MARKER_WS in line:
            return i
    return None


def count_marker_lines(text: str) -> int:
    return sum(1 for line in text.splitlines() if TODO_MARKER in line)


def is_open_marker(line: str) -> bool:
    return line.strip() == OPEN_MARKER


def is_close_marker(line: str) -> bool:
    return line.strip() == CLOSE_MARKER


def file_uses_markers(content: str) -> bool:
    """True when the content has at least one opening and one closing marker."""
    lines = content.splitlines()
    return any(is_open_marker(ln) for ln in lines) and any(
        is_close_marker(ln) for ln in lines
    )


def find_marker_spans(content: str) -> list[MarkerSpan]:
    """Return the marker spans of a file in source order.

    An opening marker seen while a span is already open is ignored, as is
    a closing marker with no open span, so spans never overlap. A span left
    open at end of file runs to the last line and is flagged ``closed=False``.
    """
    spans: list[MarkerSpan] = []
    lines = content.splitlines()
    start: int | None = None

    for i, line in enumerate(lines):
        if is_open_marker(line):
            if start is None:
                start = i
        elif is_close_marker(line) and start is not None:
            spans.append(MarkerSpan(start_line=start, end_line=i))
            start = None

    if start is not None:
        spans.append(
            MarkerSpan(start_line=start, end_line=max(len(lines) - 1, start), closed=False)
        )
    return spans


def is_todo_inside_markers(content: str, line_index: int) -> bool:
    """Whether the given line falls strictly inside a marker span."""
    return any(span.contains(line_index) for span in find_marker_spans(content))
