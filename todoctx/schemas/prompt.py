"""Assembled prompt schema."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AssembledPrompt(BaseModel):
    """The validated, scrubbed prompt handed to the output sink.

    Frozen: once validation and scrubbing complete the prompt is never
    mutated.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Final prompt text")
    instruction: str = Field(description="The primary TODO marker line")
    instruction_file: str = Field(description="Path of the TODO file")
    search_root: str = Field(description="Directory the scan was bounded to")
    files: list[str] = Field(default_factory=list, description="Files included in order")
    diff_enabled: bool = Field(default=False, description="Whether diff mode was on")
    marker_count: int = Field(default=0, ge=0, description="TODO marker lines in the text")

    @property
    def length(self) -> int:
        return len(self.text)
