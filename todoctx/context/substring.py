"""Substring marker filter.

Collapses file content down to the regions between ``// v`` and ``// ^``
marker lines. A two-state machine reads the content line by line:

* PASSTHROUGH (initial): ordinary lines are dropped. An opening marker
  switches to CAPTURING.
* CAPTURING: ordinary lines are copied verbatim. A closing marker switches
  back to PASSTHROUGH.

Every opening marker, and every closing marker that ends a capture, emits
a ``// ...`` placeholder unless the previous emitted item was already a
placeholder. An opening marker while capturing therefore separates the
two snippets. A closing marker while passing through is dropped, so
content without an opening marker filters to the empty string.
"""

from __future__ import annotations

from enum import Enum

from todoctx.markers import PLACEHOLDER, is_close_marker, is_open_marker


class _State(Enum):
    PASSTHROUGH = "passthrough"
    CAPTURING = "capturing"


def filter_substring_markers(content: str, placeholder: str = PLACEHOLDER) -> str:
    """Return only the marked regions of ``content``.

    Args:
        content: Raw file content.
        placeholder: Line emitted in place of each omitted region.

    Returns:
        The captured lines, each newline-terminated, with a blank-padded
        placeholder at every marker transition.
    """
    out: list[str] = []
    state = _State.PASSTHROUGH
    last_was_placeholder = False

    for line in content.splitlines():
        if is_open_marker(line):
            state = _State.CAPTURING
            if not last_was_placeholder:
                out.append(f"\n{placeholder}\n")
                last_was_placeholder = True
            continue

        if is_close_marker(line):
            if state is _State.CAPTURING:
                state = _State.PASSTHROUGH
                if not last_was_placeholder:
                    out.append(f"\n{placeholder}\n")
                    last_was_placeholder = True
            continue

        if state is _State.CAPTURING:
            out.append(f"{line}\n")
            last_was_placeholder = False

    return "".join(out)
