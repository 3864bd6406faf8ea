"""todoctx schema definitions.

All Pydantic v2 models shared across scanning, assembly and the CLI.
"""

from todoctx.schemas.config import DEFAULT_MANIFEST, DEFAULT_VENDOR_DIRS, PromptConfig
from todoctx.schemas.context import (
    CandidateSet,
    FileMatch,
    MarkerSpan,
    ScanOutcome,
    SourceFile,
    TargetSymbol,
)
from todoctx.schemas.prompt import AssembledPrompt

__all__ = [
    "AssembledPrompt",
    "CandidateSet",
    "DEFAULT_MANIFEST",
    "DEFAULT_VENDOR_DIRS",
    "FileMatch",
    "MarkerSpan",
    "PromptConfig",
    "ScanOutcome",
    "SourceFile",
    "TargetSymbol",
]
