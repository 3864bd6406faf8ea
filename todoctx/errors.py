"""Exception hierarchy for the prompt pipeline.

Library code raises these; only the CLI catches them and turns them into
a red message and a non-zero exit code.
"""

from __future__ import annotations


class TodoCtxError(Exception):
    """Base exception for all application-specific errors."""


# ── NotFound ──────────────────────────────────────────────────────


class NotFoundError(TodoCtxError):
    """A required input could not be located."""


class InstructionNotFoundError(NotFoundError):
    """No file carries a TODO marker, or the given file has none."""


class SymbolNotFoundError(NotFoundError):
    """The target symbol is referenced nowhere under the search root."""


class SearchRootNotFoundError(NotFoundError):
    """The directory bounding a scan does not exist."""


# ── MalformedInput ────────────────────────────────────────────────


class MalformedInputError(TodoCtxError):
    """Input exists but does not have the expected marker structure."""


class MarkerCountError(MalformedInputError):
    """The assembled prompt has the wrong number of TODO marker lines."""

    def __init__(self, expected: str, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected} '// TODO: -' markers, but found {actual}."
        )


class PrimaryMarkerMissingError(MalformedInputError):
    """Scrubbing requires the primary marker line, which is absent."""

    def __init__(self, primary_marker: str) -> None:
        self.primary_marker = primary_marker
        super().__init__(f"Primary marker '{primary_marker}' not found in prompt")


class AmbiguousInstructionError(MalformedInputError):
    """The chosen instruction file holds more than one TODO marker."""

    def __init__(self, path: str, marker_lines: list[str]) -> None:
        self.path = path
        self.marker_lines = marker_lines
        listing = "\n".join(marker_lines)
        super().__init__(
            f"Ambiguous TODO marker: file {path} contains "
            f"{len(marker_lines)} markers:\n{listing}"
        )


# ── IO and collaborators ──────────────────────────────────────────


class IOFailureError(TodoCtxError):
    """A file that the pipeline cannot proceed without is unreadable."""


class GitError(TodoCtxError):
    """A git invocation failed or returned an unusable answer."""


class ClipboardError(TodoCtxError):
    """The prompt could not be handed to the clipboard."""
