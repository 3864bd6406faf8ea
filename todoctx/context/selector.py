"""File selection for the prompt."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from todoctx.context.definitions import find_definition_files
from todoctx.context.references import ReferenceScanner
from todoctx.context.types import extract_enclosing_type, extract_types_from_file
from todoctx.errors import SymbolNotFoundError
from todoctx.languages import for_path
from todoctx.schemas.config import PromptConfig

logger = logging.getLogger(__name__)


def filter_excluded_files(paths: Iterable[str], excludes: Iterable[str]) -> list[str]:
    """Drop paths whose basename is listed in ``excludes``.

    Blank entries and directory-like entries (trailing slash) are dropped too.
    """
    excluded = {e.strip() for e in excludes if e.strip()}
    kept: list[str] = []
    for raw in paths:
        path = raw.strip()
        if not path or path.endswith("/"):
            continue
        if Path(path).name in excluded:
            continue
        kept.append(path)
    return kept


def _normalize(path: str | Path) -> str:
    return str(Path(path).resolve())


def determine_files_to_include(
    instruction_file: Path | str,
    search_root: Path | str,
    config: PromptConfig,
) -> list[str]:
    """Every file the prompt should contain, sorted and de-duplicated.

    Singular mode takes only the TODO file. Otherwise the files defining
    the types the TODO file mentions are added, exclusions applied, and
    each file's relative dependencies followed. With
    ``include_references`` the files referencing the enclosing type are
    added and exclusions applied again.

    Raises:
        SymbolNotFoundError: If references are requested and nothing
            references the enclosing type.
    """
    todo_path = _normalize(instruction_file)
    root = Path(search_root)

    if config.singular:
        logger.info("Singular mode: only including the TODO file")
        files = [todo_path]
    else:
        types = extract_types_from_file(todo_path, targeted=config.targeted)
        logger.info("Types found: %s", ", ".join(types) or "(none)")
        definitions = find_definition_files(
            types, root, config.manifest_name, config.vendor_dirs
        )
        files = [_normalize(p) for p in definitions]
        files.append(todo_path)
        files = filter_excluded_files(files, config.excludes)

    deps: list[str] = []
    for path in files:
        lang = for_path(path)
        if lang is not None:
            deps.extend(str(d) for d in lang.walk_dependencies(Path(path), root))
    files.extend(deps)

    if config.include_references:
        symbol = extract_enclosing_type(todo_path)
        logger.info("Searching for files referencing %s", symbol.name)
        candidates = ReferenceScanner(config.vendor_dirs).scan(symbol, root)
        if not len(candidates):
            raise SymbolNotFoundError(
                f"No files under {root} reference '{symbol.name}'"
            )
        files.extend(_normalize(p) for p in candidates.paths)
        files = filter_excluded_files(files, config.excludes)

    return sorted(set(files))
