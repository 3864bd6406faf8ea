"""Runtime configuration for a single prompt-generation run."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_MANIFEST = "Package.swift"

DEFAULT_VENDOR_DIRS: tuple[str, ...] = (
    "Pods",
    ".build",
    "Carthage",
    "DerivedData",
    "node_modules",
    ".git",
)


class PromptConfig(BaseModel):
    """Explicit configuration passed into the pipeline.

    Composed by ``todoctx.config`` from the TOML settings file, the
    environment overrides and the CLI flags. Nothing downstream reads
    process-wide state.
    """

    git_root: str = Field(default="", description="Repository root; discovered via git when empty")
    instruction_file: str = Field(
        default="", description="TODO file override; discovered when empty"
    )
    singular: bool = Field(default=False, description="Only include the TODO file")
    force_global: bool = Field(
        default=False, description="Use the git root instead of the nearest package"
    )
    include_references: bool = Field(
        default=False, description="Include files referencing the enclosing type"
    )
    excludes: list[str] = Field(
        default_factory=list, description="File basenames to drop from the prompt"
    )
    diff_branch: str | None = Field(
        default=None, description="Branch to diff each file against; None disables diff mode"
    )
    targeted: bool = Field(
        default=False, description="Only extract types from the block around the TODO"
    )
    disable_clipboard: bool = Field(default=False, description="Skip the clipboard copy")
    verbose: bool = Field(default=False, description="Enable debug logging")
    manifest_name: str = Field(
        default=DEFAULT_MANIFEST, description="File marking a project-root boundary"
    )
    vendor_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VENDOR_DIRS),
        description="Directory names whose subtrees are never scanned",
    )
    max_prompt_chars: int = Field(
        default=100_000, gt=0, description="Warn when the prompt exceeds this many characters"
    )

    @property
    def diff_enabled(self) -> bool:
        return bool(self.diff_branch)
