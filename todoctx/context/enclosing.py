"""Enclosing context extraction.

Finds the smallest balanced-delimiter block that contains a token. The
scan is purely lexical: a delimiter inside a string literal or comment
counts the same as one in code.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class EnclosingContextExtractor:
    """Innermost-block extractor for one delimiter pair.

    A single left-to-right pass keeps a stack of opening offsets. Each
    closing delimiter pops its partner; if the resulting span contains the
    token offset and is strictly shorter than the best span so far it
    becomes the new best. Ties keep the span found first. Unmatched
    closing delimiters are ignored.
    """

    def __init__(self, open_char: str = "{", close_char: str = "}") -> None:
        if len(open_char) != 1 or len(close_char) != 1 or open_char == close_char:
            raise ValueError(
                f"Delimiters must be two distinct characters, got {open_char!r}/{close_char!r}"
            )
        self._open = open_char
        self._close = close_char

    def find_enclosing_span(self, content: str, offset: int) -> tuple[int, int] | None:
        """Return inclusive (start, end) offsets of the innermost block around ``offset``."""
        stack: list[int] = []
        best: tuple[int, int] | None = None

        for i, ch in enumerate(content):
            if ch == self._open:
                stack.append(i)
            elif ch == self._close:
                if not stack:
                    continue
                start = stack.pop()
                if start <= offset <= i:
                    if best is None or (i - start) < (best[1] - best[0]):
                        best = (start, i)
        return best

    def extract(self, content: str, token: str) -> str | None:
        """Return the innermost block containing the first occurrence of ``token``.

        Returns None when the token is absent or no block encloses it.
        """
        if not token:
            return None
        offset = content.find(token)
        if offset < 0:
            return None
        span = self.find_enclosing_span(content, offset)
        if span is None:
            return None
        start, end = span
        return content[start : end + 1]


_BRACES = EnclosingContextExtractor("{", "}")


def extract_enclosing_context(content: str, token: str) -> str | None:
    """Innermost ``{...}`` block around ``token``, inclusive of the braces."""
    return _BRACES.extract(content, token)


def extract_inner_block(content: str, token: str) -> str | None:
    """Body of the innermost ``{...}`` block around ``token``, braces excluded."""
    block = extract_enclosing_context(content, token)
    if block is None:
        return None
    return block[1:-1]


def extract_declaration_block(
    content: str,
    token: str,
    is_candidate: Callable[[list[str], int], bool],
) -> str | None:
    """Return the declaration block that precedes and encloses ``token``.

    Walks backwards from the line holding ``token`` to the nearest line
    accepted by ``is_candidate``, then collects lines forward until the
    braces opened on or after that line balance out.

    Args:
        content: Full file content.
        token: Substring locating the anchor line (typically the TODO marker).
        is_candidate: Predicate over (lines, index) recognising a
            declaration header line.

    Returns:
        The joined block, or None if no candidate exists or the braces
        never balance.
    """
    lines = content.splitlines()
    anchor = next((i for i, line in enumerate(lines) if token in line), None)
    if anchor is None:
        return None

    start = next((i for i in range(anchor - 1, -1, -1) if is_candidate(lines, i)), None)
    if start is None:
        return None

    depth = 0
    found_open = False
    collected: list[str] = []
    for line in lines[start:]:
        collected.append(line)
        opens = line.count("{")
        if not found_open and opens:
            found_open = True
        if found_open:
            depth = max(depth + opens - line.count("}"), 0)
            if depth == 0:
                break

    if found_open and depth == 0:
        return "\n".join(collected)
    logger.debug("Declaration at line %d never balanced its braces", start + 1)
    return None
