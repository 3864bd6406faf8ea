"""Objective-C language support (``.h`` / ``.m``).

No grammar is wired in; reference scans in these files always take the
lexical fallback path.
"""

from __future__ import annotations

import re
from pathlib import Path

from todoctx.languages.base import DefinitionMatcher, LanguageSupport, dedupe

_CLASS_DECL_RE = re.compile(r"@(?:interface|implementation|protocol)\s+([A-Z][A-Za-z0-9_]*)")
_RECEIVER_RE = re.compile(r"\[\s*([A-Z][A-Za-z0-9_]*)\s+\w+")
_POINTER_RE = re.compile(r"\b([A-Z][A-Za-z0-9_]*)\s*\*")
_LOCAL_IMPORT_RE = re.compile(r'^\s*#(?:import|include)\s+"([^"]+)"')
_METHOD_RE = re.compile(r"^\s*[-+]\s*\([^)]*\)\s*\w+.*$")


class ObjCSupport(LanguageSupport):
    name = "objc"
    extensions = ("h", "m")
    matcher = DefinitionMatcher(("@interface", "@implementation", "@protocol"))

    def extract_identifiers(self, source: str) -> list[str]:
        found = [m.group(1) for m in _CLASS_DECL_RE.finditer(source)]
        found.extend(m.group(1) for m in _RECEIVER_RE.finditer(source))
        found.extend(m.group(1) for m in _POINTER_RE.finditer(source))
        return dedupe(found)

    def resolve_dependency_path(self, line: str, current_dir: Path) -> Path | None:
        m = _LOCAL_IMPORT_RE.match(line)
        if m is None:
            return None
        return current_dir / m.group(1)

    def is_declaration_line(self, lines: list[str], index: int) -> bool:
        line = lines[index]
        if not _METHOD_RE.match(line):
            return False
        if "{" in line:
            return True
        # brace on the following line
        return index + 1 < len(lines) and lines[index + 1].strip().startswith("{")

    def extract_enclosing_function(self, content: str, token: str) -> str | None:
        return self._declaration_block(content, token)
