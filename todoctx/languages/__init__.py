"""Language registry keyed by file extension."""

from __future__ import annotations

from pathlib import Path

from todoctx.languages.base import DefinitionMatcher, LanguageSupport
from todoctx.languages.javascript import JavaScriptSupport
from todoctx.languages.objc import ObjCSupport
from todoctx.languages.swift import SwiftSupport

_SUPPORTED: tuple[LanguageSupport, ...] = (SwiftSupport(), JavaScriptSupport(), ObjCSupport())

_BY_EXTENSION: dict[str, LanguageSupport] = {
    ext: lang for lang in _SUPPORTED for ext in lang.extensions
}


def for_extension(ext: str) -> LanguageSupport | None:
    """Return the language for an extension (with or without the dot), or None."""
    return _BY_EXTENSION.get(ext.lower().lstrip("."))


def for_path(path: str | Path) -> LanguageSupport | None:
    return for_extension(Path(path).suffix)


def supported_extensions() -> frozenset[str]:
    return frozenset(_BY_EXTENSION)


__all__ = [
    "DefinitionMatcher",
    "JavaScriptSupport",
    "LanguageSupport",
    "ObjCSupport",
    "SwiftSupport",
    "for_extension",
    "for_path",
    "supported_extensions",
]
