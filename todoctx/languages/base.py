"""Per-language capability interface.

Every supported language implements one ``LanguageSupport`` subclass;
callers look it up by file extension and forward the work, so no other
module branches on the language.
"""

from __future__ import annotations

import importlib
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import tree_sitter

from todoctx.context.enclosing import extract_declaration_block

logger = logging.getLogger(__name__)


class DefinitionMatcher:
    """Keyword-plus-name test for whether content declares a type.

    Matches any of ``keywords`` followed by whitespace and the exact name
    on a word boundary, so ``Foo`` never matches ``class FooBar``.
    """

    def __init__(self, keywords: tuple[str, ...]) -> None:
        if not keywords:
            raise ValueError("DefinitionMatcher needs at least one keyword")
        self.keywords = keywords
        self._keyword_alt = "|".join(re.escape(k) for k in keywords)

    def pattern_for(self, name: str) -> re.Pattern[str]:
        return re.compile(
            rf"(?<![\w@])(?:{self._keyword_alt})\s+{re.escape(name)}\b"
        )

    def defines(self, content: str, name: str) -> bool:
        if not name:
            return False
        return self.pattern_for(name).search(content) is not None

    def defines_any(self, content: str, names: list[str]) -> bool:
        return any(self.defines(content, n) for n in names)


def dedupe(items: list[str]) -> list[str]:
    """Drop repeats while keeping first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class LanguageSupport(ABC):
    """What the pipeline needs from one language.

    Subclasses set the class attributes and implement
    ``extract_identifiers``; everything else has a working default.
    """

    name: str = ""
    extensions: tuple[str, ...] = ()
    matcher: DefinitionMatcher
    # Importable tree-sitter grammar module exposing ``language()``.
    grammar_module: str | None = None
    # Syntax-node kinds that carry a bare identifier.
    identifier_node_types: frozenset[str] = frozenset()
    # Syntax-node kinds that declare a named type.
    type_declaration_node_types: frozenset[str] = frozenset()

    @abstractmethod
    def extract_identifiers(self, source: str) -> list[str]:
        """Candidate identifiers in a chunk of source, first-seen order.

        Heuristic: used to narrow the definition search, not exhaustive.
        """

    def file_defines_any(self, content: str, identifiers: list[str]) -> bool:
        """Whether ``content`` declares any of ``identifiers``."""
        return self.matcher.defines_any(content, identifiers)

    def resolve_dependency_path(self, line: str, current_dir: Path) -> Path | None:
        """Best-effort dependency path named on one source line.

        None means the line names no resolvable dependency.
        """
        return None

    def normalize_dependency(self, path: Path) -> Path:
        return path

    def walk_dependencies(self, file_path: Path, search_root: Path) -> list[Path]:
        """Direct relative dependencies of ``file_path`` inside ``search_root``."""
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("Cannot read %s for dependency walk", file_path)
            return []

        root = search_root.resolve()
        current_dir = file_path.parent
        deps: list[Path] = []
        for line in content.splitlines():
            raw = self.resolve_dependency_path(line, current_dir)
            if raw is None:
                continue
            candidate = self.normalize_dependency(raw).resolve()
            if candidate.is_relative_to(root) and candidate.is_file():
                deps.append(candidate)
        return deps

    def is_declaration_line(self, lines: list[str], index: int) -> bool:
        """Whether ``lines[index]`` opens a function or type declaration."""
        return False

    def extract_enclosing_function(self, content: str, token: str) -> str | None:
        """Function or method block enclosing ``token``, if this language knows how.

        The base implementation always returns None; absence is a normal
        answer, not an error.
        """
        return None

    def _declaration_block(self, content: str, token: str) -> str | None:
        return extract_declaration_block(content, token, self.is_declaration_line)

    def load_language(self) -> tree_sitter.Language | None:
        """Load the tree-sitter grammar, or None when it is not installed."""
        if self.grammar_module is None:
            return None
        try:
            module: Any = importlib.import_module(self.grammar_module)
        except ImportError:
            logger.debug("Grammar %s not installed", self.grammar_module)
            return None
        return tree_sitter.Language(module.language())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
