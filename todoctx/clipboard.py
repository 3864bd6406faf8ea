"""Clipboard output sink."""

from __future__ import annotations

import logging
import shutil
import subprocess

from todoctx.errors import ClipboardError

logger = logging.getLogger(__name__)

# Tried in order; the first one on PATH wins.
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
)


def find_clipboard_command() -> tuple[str, ...] | None:
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(text: str, disabled: bool = False) -> bool:
    """Pipe ``text`` to the system clipboard.

    Returns:
        True if the text was copied, False if copying is disabled.

    Raises:
        ClipboardError: If no clipboard tool is available or it fails.
    """
    if disabled:
        logger.info("Clipboard copy disabled")
        return False

    cmd = find_clipboard_command()
    if cmd is None:
        raise ClipboardError(
            "No clipboard tool found (tried pbcopy, wl-copy, xclip); use --stdout"
        )

    try:
        subprocess.run(list(cmd), input=text, text=True, check=True, timeout=30)
    except (OSError, subprocess.SubprocessError) as e:
        raise ClipboardError(f"{cmd[0]} failed: {e}") from e
    logger.debug("Copied %d characters with %s", len(text), cmd[0])
    return True
