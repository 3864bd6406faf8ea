"""Search root resolution.

Bounds a scan to the smallest enclosing project: the deepest
manifest-bearing directory that contains the TODO file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from todoctx.errors import SearchRootNotFoundError
from todoctx.schemas.config import DEFAULT_MANIFEST, DEFAULT_VENDOR_DIRS

logger = logging.getLogger(__name__)


def get_search_roots(
    base: Path | str,
    manifest_name: str = DEFAULT_MANIFEST,
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
) -> list[Path]:
    """Candidate project roots under ``base``.

    If ``base`` itself holds the manifest it is the only candidate.
    Otherwise the result is ``base`` (unless it is itself a vendor
    directory) plus every descendant directory holding the manifest,
    skipping vendor subtrees. Sorted and free of duplicates.

    Raises:
        SearchRootNotFoundError: If ``base`` is not a directory.
    """
    base = Path(base)
    if not base.is_dir():
        raise SearchRootNotFoundError(f"'{base}' is not a valid directory.")

    if (base / manifest_name).is_file():
        return [base]

    pruned = frozenset(vendor_dirs)
    found: set[Path] = set()
    if base.name not in pruned:
        found.add(base)

    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = [d for d in dirnames if d not in pruned]
        if manifest_name in filenames:
            found.add(Path(dirpath))

    return sorted(found)


def determine_search_root(
    base: Path | str,
    instruction_file: Path | str,
    manifest_name: str = DEFAULT_MANIFEST,
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
) -> Path:
    """Pick the deepest candidate root that contains ``instruction_file``.

    Falls back to ``base`` when no candidate is a prefix of the file path.
    """
    base = Path(base)
    candidates = get_search_roots(base, manifest_name, vendor_dirs)
    if len(candidates) == 1:
        return candidates[0]

    todo_path = Path(instruction_file).resolve()
    containing = [c for c in candidates if todo_path.is_relative_to(c.resolve())]
    if not containing:
        logger.debug("No candidate root contains %s, using %s", todo_path, base)
        return base

    chosen = max(containing, key=lambda c: len(c.resolve().parts))
    logger.debug("Search root for %s: %s", todo_path, chosen)
    return chosen
