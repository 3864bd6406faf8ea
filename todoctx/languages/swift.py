"""Swift language support.

Identifiers are declared type names plus unqualified lower-case call
sites, so helper functions (``foo()`` → ``func foo``) are pulled in along
with types. Swift imports name modules, not paths, so there is no
dependency walk.
"""

from __future__ import annotations

import re

from todoctx.languages.base import DefinitionMatcher, LanguageSupport, dedupe

_DECL_RE = re.compile(r"\b(?:class|struct|enum|protocol|typealias)\s+([A-Z][A-Za-z0-9_]*)")
_CALL_RE = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\s*\(")

_FUNCTION_LINE_RE = re.compile(
    r"^\s*(?:(?:public|private|internal|fileprivate|open|static|final|override|@\w+)\s+)*"
    r"(?:func\s+\w+|init\??)(?:<[^>]+>)?\s*\([^)]*\).*\{"
)

_RESERVED = frozenset(
    {"if", "for", "while", "switch", "guard", "return", "catch", "throw", "init", "deinit"}
)


class SwiftSupport(LanguageSupport):
    name = "swift"
    extensions = ("swift",)
    matcher = DefinitionMatcher(("class", "struct", "enum", "protocol", "typealias"))
    grammar_module = "tree_sitter_swift"
    identifier_node_types = frozenset({"simple_identifier", "type_identifier"})
    type_declaration_node_types = frozenset(
        {"class_declaration", "struct_declaration", "enum_declaration", "protocol_declaration"}
    )

    def extract_identifiers(self, source: str) -> list[str]:
        found = [m.group(1) for m in _DECL_RE.finditer(source)]
        for m in _CALL_RE.finditer(source):
            ident = m.group(1)
            if ident not in _RESERVED and ident[0].islower():
                found.append(ident)
        return dedupe(found)

    def file_defines_any(self, content: str, identifiers: list[str]) -> bool:
        if self.matcher.defines_any(content, identifiers):
            return True
        # a free-standing `func foo(` also counts as a definition
        return any(
            re.search(rf"\bfunc\s+{re.escape(ident)}\s*\(", content) for ident in identifiers
        )

    def is_declaration_line(self, lines: list[str], index: int) -> bool:
        return _FUNCTION_LINE_RE.match(lines[index]) is not None

    def extract_enclosing_function(self, content: str, token: str) -> str | None:
        return self._declaration_block(content, token)
