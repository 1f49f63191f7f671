"""Display-width measurement for prompt text.

The editor needs to know how many columns the prompt occupies before the
first editable character, so that wrapped rows line up. Prompts may carry
SGR colour codes or OSC 8 links, which take no columns.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[ -/]*[@-~]"  # CSI
    r"|\x1b\]8;;[^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC 8
)

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 256


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def _cluster_width(cluster: str) -> int:
    first = cluster[0]
    if len(cluster) > 1:
        # Emoji presentation, ZWJ sequences, and flags render double width.
        if any(ch in ("\ufe0f", "\u200d") or 0x1F1E6 <= ord(ch) <= 0x1F1FF for ch in cluster):
            return 2
        if unicodedata.category(first) in ("Mn", "Me", "Cf"):
            return 0
    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Return the number of terminal columns *text* occupies on one row."""
    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    width = sum(_cluster_width(g) for g in grapheme.graphemes(stripped))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = width
    return width
