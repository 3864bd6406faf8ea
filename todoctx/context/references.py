"""Reference scanner.

Walks a search root and decides, file by file, whether the target
symbol is referenced. Languages with an installed tree-sitter grammar
are checked structurally by comparing identifier nodes against the
symbol; everything else, and any file whose parse fails, is checked
with a word-boundary regex over the raw text. Each decision is recorded
with the path that produced it.

Known imprecision: the regex path also counts occurrences inside string
literals and comments.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

import tree_sitter

from todoctx.context.structural import iter_nodes, node_text, parse_source
from todoctx.context.walk import iter_source_files
from todoctx.errors import SearchRootNotFoundError
from todoctx.languages import LanguageSupport, for_path
from todoctx.schemas.config import DEFAULT_VENDOR_DIRS
from todoctx.schemas.context import (
    CandidateSet,
    FileMatch,
    ScanOutcome,
    SourceFile,
    TargetSymbol,
)

logger = logging.getLogger(__name__)


class ReferenceScanner:
    """One scan of one search root for one symbol.

    Grammars are loaded lazily and kept for the lifetime of the scanner;
    parsers are not.
    """

    def __init__(self, vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS) -> None:
        self.vendor_dirs = tuple(vendor_dirs)
        self._grammars: dict[str, tree_sitter.Language | None] = {}

    def scan(self, symbol: TargetSymbol | str, search_root: Path | str) -> CandidateSet:
        """Classify every supported file under ``search_root``.

        Raises:
            SearchRootNotFoundError: If ``search_root`` is not a directory.
        """
        name = symbol.name if isinstance(symbol, TargetSymbol) else symbol
        root = Path(search_root)
        if not root.is_dir():
            raise SearchRootNotFoundError(f"Search root does not exist: {root}")

        candidates = CandidateSet(symbol=name, search_root=str(root))
        pattern = word_pattern(name)
        for path in iter_source_files(root, self.vendor_dirs):
            candidates.add(self.classify(path, name, pattern))

        logger.debug(
            "Scanned %d files under %s, %d reference %s",
            len(candidates.decisions),
            root,
            len(candidates),
            name,
        )
        return candidates

    def classify(
        self, path: Path, symbol: str, pattern: re.Pattern[str] | None = None
    ) -> FileMatch:
        """Decide whether one file references ``symbol`` and tag how."""
        try:
            source = SourceFile.read(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", path, exc)
            return FileMatch(path=str(path), outcome=ScanOutcome.SKIPPED)
        content = source.content

        lang = for_path(path)
        if lang is not None:
            grammar = self._grammar_for(lang)
            if grammar is not None:
                tree = parse_source(grammar, content)
                if tree is not None:
                    found = any(
                        node_text(n) == symbol
                        for n in iter_nodes(tree.root_node, lang.identifier_node_types)
                    )
                    return FileMatch(
                        path=str(path), outcome=ScanOutcome.STRUCTURAL, referenced=found
                    )
                logger.debug("Structural parse failed for %s, using regex", path)

        pattern = pattern or word_pattern(symbol)
        return FileMatch(
            path=str(path),
            outcome=ScanOutcome.FALLBACK,
            referenced=pattern.search(content) is not None,
        )

    def _grammar_for(self, lang: LanguageSupport) -> tree_sitter.Language | None:
        if lang.name not in self._grammars:
            self._grammars[lang.name] = lang.load_language()
        return self._grammars[lang.name]


def word_pattern(symbol: str) -> re.Pattern[str]:
    # `$` is an identifier character in JavaScript, so it counts as part of the word
    return re.compile(rf"(?<![\w$]){re.escape(symbol)}(?![\w$])")


def find_files_referencing(
    symbol: TargetSymbol | str,
    search_root: Path | str,
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
) -> list[str]:
    """Sorted paths of files under ``search_root`` that reference ``symbol``."""
    return ReferenceScanner(vendor_dirs).scan(symbol, search_root).paths
