"""Type extraction around the TODO marker.

Two questions are answered here: which type-like names a TODO file
mentions (they drive the definition finder) and which type the TODO
sits in (the target symbol for the reference scanner).
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from todoctx.context.enclosing import extract_enclosing_context, extract_inner_block
from todoctx.context.structural import iter_nodes, node_text, parse_source
from todoctx.context.substring import filter_substring_markers
from todoctx.errors import IOFailureError, NotFoundError
from todoctx.languages import for_path
from todoctx.markers import (
    TODO_MARKER,
    TODO_MARKER_WS,
    file_uses_markers,
    is_todo_inside_markers,
    todo_index,
)
from todoctx.schemas.context import TargetSymbol

logger = logging.getLogger(__name__)

_SIMPLE_TYPE_RE = re.compile(r"^[A-Z][A-Za-z0-9]+$")
_BRACKET_TYPE_RE = re.compile(r"^\[([A-Z][A-Za-z0-9]+)\]$")
_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
_TYPE_DECL_LINE_RE = re.compile(r"(class|struct|enum|protocol)\s+(\w+)")


class TypeExtractor:
    """Pulls capitalised type-like tokens out of source lines.

    Import lines and ordinary ``//`` comments are skipped. The TODO line is
    kept with its marker prefix removed, so types named in the instruction
    count too.
    """

    def tokens(self, line: str) -> list[str]:
        trimmed = line.strip()
        if (
            not trimmed
            or trimmed.startswith(("import ", "#import", "#include"))
            or (trimmed.startswith("//") and not trimmed.startswith(TODO_MARKER))
        ):
            return []
        if trimmed.startswith(TODO_MARKER):
            trimmed = trimmed[len(TODO_MARKER) :].lstrip()
        return _NON_ALNUM_RE.sub(" ", trimmed).split()

    def extract(self, lines: list[str]) -> set[str]:
        found: set[str] = set()
        for line in lines:
            for token in self.tokens(line):
                if _SIMPLE_TYPE_RE.match(token):
                    found.add(token)
                else:
                    bracket = _BRACKET_TYPE_RE.match(token)
                    if bracket:
                        found.add(bracket.group(1))
        return found


def enclosing_block_for(path: Path | str, content: str) -> str | None:
    """Function block around the TODO marker, else the innermost brace block."""
    lang = for_path(path)
    if lang is not None:
        block = lang.extract_enclosing_function(content, TODO_MARKER_WS)
        if block is not None:
            return block
    return extract_enclosing_context(content, TODO_MARKER_WS)


def select_type_slice(path: Path | str, content: str, targeted: bool = False) -> str:
    """The part of a TODO file that type extraction looks at.

    Targeted mode keeps only the body of the innermost block around the
    marker. Files with substring markers are reduced to their marked
    regions, plus the enclosing block when the marker falls outside them.
    Everything else is used whole.
    """
    if targeted:
        inner = extract_inner_block(content, TODO_MARKER_WS)
        return inner if inner is not None else content

    if file_uses_markers(content):
        filtered = filter_substring_markers(content, placeholder="")
        if TODO_MARKER not in filtered:
            block = enclosing_block_for(path, content)
            if block is not None:
                filtered = f"{filtered}\n{block}"
        return filtered

    return content


def extract_types_from_file(path: Path | str, targeted: bool = False) -> list[str]:
    """Sorted type names and identifiers mentioned around the TODO.

    Raises:
        IOFailureError: If the file cannot be read.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailureError(f"Failed to open file {path}: {exc}") from exc

    slice_ = select_type_slice(path, content, targeted)
    found = TypeExtractor().extract(slice_.splitlines())
    lang = for_path(path)
    if lang is not None:
        found.update(lang.extract_identifiers(slice_))
    return sorted(found)


def _structural_enclosing_type(path: Path, content: str, todo_offset: int) -> str | None:
    lang = for_path(path)
    if lang is None or not lang.type_declaration_node_types:
        return None
    grammar = lang.load_language()
    if grammar is None:
        return None
    tree = parse_source(grammar, content, allow_errors=True)
    if tree is None:
        return None

    byte_offset = len(content[:todo_offset].encode("utf-8"))
    candidate: str | None = None
    for node in iter_nodes(tree.root_node, lang.type_declaration_node_types):
        if node.start_byte > byte_offset:
            continue
        name = node.child_by_field_name("name")
        if name is not None:
            candidate = node_text(name)
    return candidate


def extract_enclosing_type(path: Path | str) -> TargetSymbol:
    """Name of the type declared last before the TODO marker.

    Tries a syntax tree first, then a line regex over the lines preceding
    the marker, and finally falls back to the file stem.

    Raises:
        NotFoundError: If the file does not exist.
        IOFailureError: If the file cannot be decoded.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFoundError(f"Error reading file {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailureError(f"Error reading file {path}: {exc}") from exc

    offset = content.find(TODO_MARKER_WS)
    if offset < 0:
        offset = len(content)

    name = _structural_enclosing_type(path, content, offset)
    if name is None:
        marker_line = todo_index(content)
        lines = content.splitlines()
        before = lines if marker_line is None else lines[:marker_line]
        for line in before:
            match = _TYPE_DECL_LINE_RE.search(line)
            if match:
                name = match.group(2)

    if name is None:
        name = path.stem
        logger.debug("No type declaration before the TODO in %s, using %s", path, name)
    return TargetSymbol(name=name, source_path=str(path))


def todo_outside_markers(content: str) -> bool:
    """True when the file uses substring markers and the TODO is outside them."""
    if not file_uses_markers(content):
        return False
    idx = todo_index(content)
    return idx is not None and not is_todo_inside_markers(content, idx)
