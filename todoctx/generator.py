"""Prompt generation pipeline.

Locates the instruction, bounds the scan, selects files, assembles the
prompt and enforces its marker structure before anything leaves the
pipeline.
"""

from __future__ import annotations

import logging
from pathlib import Path

from todoctx.context.assembler import assemble_prompt
from todoctx.context.instruction import extract_instruction_content, locate_instruction_file
from todoctx.context.search_root import determine_search_root
from todoctx.context.selector import determine_files_to_include
from todoctx.git import GitRepository
from todoctx.schemas.config import PromptConfig
from todoctx.schemas.prompt import AssembledPrompt
from todoctx.validation import scrub_extra_todo_markers, validate_marker_count

logger = logging.getLogger(__name__)


class PromptGenerator:
    """Runs the pipeline once for one ``PromptConfig``.

    Args:
        config: Fully composed run configuration.
        git: Git collaborator; built from ``config.git_root`` when omitted.
    """

    def __init__(self, config: PromptConfig, git: GitRepository | None = None) -> None:
        self.config = config
        self._git = git

    @property
    def git(self) -> GitRepository:
        if self._git is None:
            self._git = GitRepository(self.config.git_root or ".")
        return self._git

    def resolve_git_root(self) -> Path:
        if self.config.git_root:
            return Path(self.config.git_root)
        return self.git.toplevel()

    def resolve_search_root(self, git_root: Path, instruction_file: Path) -> Path:
        if self.config.force_global:
            logger.info("Force global: using git root %s", git_root)
            return git_root
        return determine_search_root(
            git_root, instruction_file, self.config.manifest_name, self.config.vendor_dirs
        )

    def generate(self) -> AssembledPrompt:
        """Produce the validated prompt.

        Raises:
            NotFoundError: Instruction file, search root or referenced
                symbol missing.
            MalformedInputError: Marker structure wrong after scrubbing.
            GitError: Repository root or diff branch unusable.
        """
        cfg = self.config
        git_root = self.resolve_git_root()
        logger.info("Git root: %s", git_root)

        if cfg.diff_branch:
            self.git.verify_branch(cfg.diff_branch)

        instruction_file = locate_instruction_file(
            git_root, cfg.instruction_file, cfg.vendor_dirs
        )
        logger.info("Instruction file: %s", instruction_file)

        search_root = self.resolve_search_root(git_root, instruction_file)
        logger.info("Search root: %s", search_root)

        instruction = extract_instruction_content(instruction_file).strip()
        files = determine_files_to_include(instruction_file, search_root, cfg)

        raw = assemble_prompt(
            files,
            todo_file=instruction_file,
            diff_branch=cfg.diff_branch,
            git=self.git if cfg.diff_branch else None,
        )
        text = scrub_extra_todo_markers(raw, cfg.diff_enabled, instruction)
        count = validate_marker_count(text, cfg.diff_enabled)

        return AssembledPrompt(
            text=text,
            instruction=instruction,
            instruction_file=str(instruction_file),
            search_root=str(search_root),
            files=files,
            diff_enabled=cfg.diff_enabled,
            marker_count=count,
        )
