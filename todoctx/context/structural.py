"""Thin helpers over tree-sitter parsing.

A parser is created for one file and dropped right after; only the
grammar (``tree_sitter.Language``) is shared.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import tree_sitter

logger = logging.getLogger(__name__)


def parse_source(
    language: tree_sitter.Language, content: str, allow_errors: bool = False
) -> tree_sitter.Tree | None:
    """Parse ``content`` with a fresh parser.

    Returns None when the parser raises, or when the tree contains error
    nodes and ``allow_errors`` is false.
    """
    parser = tree_sitter.Parser(language)
    try:
        tree = parser.parse(content.encode("utf-8"))
    except (ValueError, RuntimeError) as exc:
        logger.debug("tree-sitter parse raised: %s", exc)
        return None
    if tree.root_node.has_error and not allow_errors:
        return None
    return tree


def iter_nodes(root: tree_sitter.Node, types: frozenset[str]) -> Iterator[tree_sitter.Node]:
    """Yield every descendant of ``root`` (inclusive) whose type is in ``types``, pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type in types:
            yield node
        stack.extend(reversed(node.children))


def node_text(node: tree_sitter.Node) -> str:
    raw = node.text
    return raw.decode("utf-8", errors="replace") if raw is not None else ""
