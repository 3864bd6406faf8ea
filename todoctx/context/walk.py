"""Depth-first source tree walk with vendor pruning."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from todoctx.languages import supported_extensions
from todoctx.schemas.config import DEFAULT_VENDOR_DIRS


def iter_source_files(
    root: Path,
    vendor_dirs: Iterable[str] = DEFAULT_VENDOR_DIRS,
    extensions: frozenset[str] | None = None,
) -> Iterator[Path]:
    """Yield supported source files under ``root``.

    Directories named in ``vendor_dirs`` are removed from the walk before
    descending, so nothing beneath them is ever visited. Directory and file
    names are visited in sorted order.
    """
    pruned = frozenset(vendor_dirs)
    allowed = extensions if extensions is not None else supported_extensions()

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in pruned)
        for name in sorted(filenames):
            ext = os.path.splitext(name)[1].lstrip(".").lower()
            if ext in allowed:
                yield Path(dirpath) / name
