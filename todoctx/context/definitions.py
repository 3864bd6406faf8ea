"""Definition finder: which files declare the types a TODO file mentions."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from todoctx.context.search_root import get_search_roots
from todoctx.context.walk import iter_source_files
from todoctx.languages import for_path
from todoctx.schemas.config import DEFAULT_MANIFEST, DEFAULT_VENDOR_DIRS
from todoctx.schemas.context import SourceFile

logger = logging.getLogger(__name__)


def find_definition_files(
    types: Iterable[str],
    root: Path | str,
    manifest_name: str = DEFAULT_MANIFEST,
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
) -> list[str]:
    """Return sorted paths of files defining any of ``types``.

    Every candidate search root under ``root`` is walked; roots overlap, so
    the result is de-duplicated. Unreadable files are skipped.

    Raises:
        SearchRootNotFoundError: If ``root`` is not a directory.
    """
    wanted = [t.strip() for t in types if t.strip()]
    if not wanted:
        return []

    vendor_dirs = tuple(vendor_dirs)
    found: set[str] = set()
    for search_root in get_search_roots(root, manifest_name, vendor_dirs):
        for path in iter_source_files(search_root, vendor_dirs):
            key = str(path)
            if key in found:
                continue
            lang = for_path(path)
            if lang is None:
                continue
            try:
                source = SourceFile.read(path)
            except (OSError, UnicodeDecodeError):
                logger.debug("Skipping unreadable file %s", path)
                continue
            if lang.file_defines_any(source.content, wanted):
                found.add(key)

    logger.debug("Definition files for %d types: %d", len(wanted), len(found))
    return sorted(found)
