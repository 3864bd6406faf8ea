"""JavaScript language support.

Identifiers are unqualified lower-case calls plus capitalised
class-like names. Dependencies are followed through relative
``import ... from '...'`` and ``require('...')`` statements.
"""

from __future__ import annotations

import re
from pathlib import Path

from todoctx.languages.base import DefinitionMatcher, LanguageSupport, dedupe

_CALL_RE = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\s*\(")
_CLASS_RE = re.compile(r"\b(?:new\s+)?([A-Z][A-Za-z0-9_]*)\s*\(")
_IMPORT_FROM_RE = re.compile(r"""from\s+['"]([^'"]+)['"]""")
_REQUIRE_RE = re.compile(r"""require\(\s*['"]([^'"]+)['"]\s*\)""")

_RESERVED = frozenset(
    {
        "if", "for", "while", "switch", "catch", "function", "return",
        "class", "new", "await", "async", "const", "let", "var", "require",
    }
)

_FUNCTION_LINE_RES = (
    re.compile(r"^\s*(?:(?:const|var|let)\s+)?\w+\s*=\s*(?:async\s+)?function\s*\([^)]*\)\s*\{"),
    re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\s+\w+\s*\([^)]*\)\s*\{"),
    re.compile(r"^\s*(?:(?:const|var|let)\s+)?\w+\s*=\s*(?:async\s+)?\([^)]*\)\s*=>\s*\{"),
    re.compile(r"""^\s*Parse\.Cloud\.define\s*\(\s*["'].+?["']\s*,\s*(?:async\s+)?\([^)]*\)\s*=>\s*\{"""),
)


def _definition_patterns(ident: str) -> list[str]:
    name = re.escape(ident)
    return [
        rf"\bfunction\s+{name}\b",
        rf"\b(?:const|let|var)\s+{name}\s*=\s*(?:async\s+)?(?:function\b|\()",
        rf"\bexport\s+(?:async\s+)?function\s+{name}\b",
        rf"\bexport\s+\{{[^}}]*\b{name}\b[^}}]*\}}",
        rf"\bmodule\.exports\s*=\s*{name}\b",
        rf"\bexports\.{name}\s*=",
    ]


class JavaScriptSupport(LanguageSupport):
    name = "javascript"
    extensions = ("js", "jsx", "mjs", "cjs")
    matcher = DefinitionMatcher(("class",))
    grammar_module = "tree_sitter_javascript"
    identifier_node_types = frozenset(
        {
            "identifier",
            "property_identifier",
            "shorthand_property_identifier",
            "shorthand_property_identifier_pattern",
        }
    )
    type_declaration_node_types = frozenset({"class_declaration"})

    def extract_identifiers(self, source: str) -> list[str]:
        found: list[str] = []
        for m in _CALL_RE.finditer(source):
            ident = m.group(1)
            if ident not in _RESERVED and ident[0].islower():
                found.append(ident)
        found.extend(m.group(1) for m in _CLASS_RE.finditer(source))
        return dedupe(found)

    def file_defines_any(self, content: str, identifiers: list[str]) -> bool:
        for ident in identifiers:
            if any(re.search(p, content) for p in _definition_patterns(ident)):
                return True
        return self.matcher.defines_any(content, identifiers)

    def resolve_dependency_path(self, line: str, current_dir: Path) -> Path | None:
        m = _IMPORT_FROM_RE.search(line) or _REQUIRE_RE.search(line)
        if m is None:
            return None
        return current_dir / m.group(1)

    def normalize_dependency(self, path: Path) -> Path:
        if not path.suffix:
            return path.with_suffix(".js")
        return path

    def is_declaration_line(self, lines: list[str], index: int) -> bool:
        line = lines[index]
        return any(r.match(line) for r in _FUNCTION_LINE_RES)

    def extract_enclosing_function(self, content: str, token: str) -> str | None:
        return self._declaration_block(content, token)
