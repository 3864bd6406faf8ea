"""Configuration composition.

Builds the ``PromptConfig`` for one run from three layers, lowest
priority first: the ``[todoctx]`` table of ``.todoctx.toml`` at the
repository root, environment overrides, and CLI flags.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from todoctx.errors import MalformedInputError
from todoctx.schemas.config import PromptConfig

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = ".todoctx.toml"

# Keys accepted from the settings file
_SETTINGS_KEYS = {"excludes", "manifest_name", "vendor_dirs", "max_prompt_chars"}


def load_settings(path: Path) -> dict[str, Any]:
    """Read the ``[todoctx]`` table from a TOML settings file.

    A missing file yields an empty dict. Unknown keys are ignored with a
    warning.

    Raises:
        MalformedInputError: If the file is not valid TOML or the table
            has the wrong shape.
    """
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise MalformedInputError(f"Invalid TOML in {path}: {e}") from e

    section = raw.get("todoctx", {})
    if not isinstance(section, dict):
        raise MalformedInputError(f"[todoctx] in {path} must be a table")

    settings: dict[str, Any] = {}
    for key, value in section.items():
        if key in _SETTINGS_KEYS:
            settings[key] = value
        else:
            logger.warning("Ignoring unknown setting '%s' in %s", key, path)
    return settings


def config_from_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate environment overrides into config fields.

    ``DISABLE_PBCOPY`` and ``TARGETED`` are flags: being set at all turns
    them on. Empty ``GET_*`` and ``DIFF_WITH_BRANCH`` values are ignored.
    """
    overrides: dict[str, Any] = {}
    if environ.get("GET_GIT_ROOT"):
        overrides["git_root"] = environ["GET_GIT_ROOT"]
    if environ.get("GET_INSTRUCTION_FILE"):
        overrides["instruction_file"] = environ["GET_INSTRUCTION_FILE"]
    if environ.get("DIFF_WITH_BRANCH"):
        overrides["diff_branch"] = environ["DIFF_WITH_BRANCH"]
    if "DISABLE_PBCOPY" in environ:
        overrides["disable_clipboard"] = True
    if "TARGETED" in environ:
        overrides["targeted"] = True
    return overrides


def build_config(
    cli_overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    settings_dir: Path | None = None,
) -> PromptConfig:
    """Compose a ``PromptConfig`` from settings file, environment and CLI.

    ``None`` values in ``cli_overrides`` mean "not given" and do not mask
    lower layers. ``excludes`` from the settings file and the CLI are
    combined rather than replaced.

    Raises:
        MalformedInputError: If the merged values fail validation.
    """
    merged: dict[str, Any] = {}
    if settings_dir is not None:
        merged.update(load_settings(settings_dir / SETTINGS_FILENAME))
    merged.update(config_from_env(environ or {}))

    for key, value in (cli_overrides or {}).items():
        if value is None:
            continue
        if key == "excludes":
            merged["excludes"] = [*merged.get("excludes", []), *value]
        else:
            merged[key] = value

    try:
        return PromptConfig(**merged)
    except ValidationError as e:
        raise MalformedInputError(f"Invalid configuration: {e}") from e
