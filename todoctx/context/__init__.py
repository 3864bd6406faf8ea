"""Context extraction: blocks, marker regions, references and file selection."""

from todoctx.context.enclosing import (
    EnclosingContextExtractor,
    extract_declaration_block,
    extract_enclosing_context,
    extract_inner_block,
)
from todoctx.context.substring import filter_substring_markers

__all__ = [
    "EnclosingContextExtractor",
    "extract_declaration_block",
    "extract_enclosing_context",
    "extract_inner_block",
    "filter_substring_markers",
]
