"""Prompt assembly.

Each included file is reduced to the part worth sending, rendered into
its section template (with an optional diff), and the call to action
closes the prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from todoctx.context.substring import filter_substring_markers
from todoctx.context.types import enclosing_block_for, todo_outside_markers
from todoctx.git import GitRepository
from todoctx.markers import CTA_INSTRUCTION, PLACEHOLDER, file_uses_markers, unescape_newlines
from todoctx.prompts import render_closing, render_file_section
from todoctx.schemas.context import SourceFile

logger = logging.getLogger(__name__)

ENCLOSING_CONTEXT_LABEL = "// Enclosing context:"


class FileProcessor:
    """Reduces one file's content for the prompt."""

    def process(self, source: SourceFile, todo_file: Path | None = None) -> str:
        """Return the content to embed for ``source``.

        Files using substring markers are collapsed to their marked
        regions. For the TODO file, when the TODO sits outside every
        marked region, the block enclosing it is appended so the
        instruction stays in the prompt.
        """
        content = source.content
        if not file_uses_markers(content):
            return content

        processed = filter_substring_markers(content, PLACEHOLDER)
        name = Path(source.path).name
        if todo_file is not None and name == todo_file.name and todo_outside_markers(content):
            block = enclosing_block_for(source.path, content)
            if block is not None:
                processed += f"\n\n{ENCLOSING_CONTEXT_LABEL}\n{block}"
        return processed


def assemble_prompt(
    files: Iterable[str],
    todo_file: Path | str | None = None,
    diff_branch: str | None = None,
    git: GitRepository | None = None,
    processor: FileProcessor | None = None,
) -> str:
    """Build the raw prompt text for ``files``.

    Files are taken in sorted order without duplicates. Missing files and
    files that cannot be read as UTF-8 are skipped with a warning. When
    ``diff_branch`` is set each file's diff against that branch, if any,
    follows its contents.

    Returns:
        The unvalidated prompt, escaped newlines already converted.
    """
    processor = processor or FileProcessor()
    todo_path = Path(todo_file) if todo_file is not None else None
    if diff_branch and git is None:
        git = GitRepository()

    sections: list[str] = []
    for name in sorted(set(files)):
        path = Path(name)
        if not path.is_file():
            logger.warning("File %s does not exist, skipping", name)
            continue

        try:
            source = SourceFile.read(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s, skipping: %s", name, e)
            continue

        diff = None
        if diff_branch and git is not None:
            diff = git.diff_file(path, diff_branch)

        sections.append(
            render_file_section(
                path.name, processor.process(source, todo_path), diff, diff_branch
            )
        )

    sections.append(render_closing(CTA_INSTRUCTION))
    return unescape_newlines("".join(sections))
