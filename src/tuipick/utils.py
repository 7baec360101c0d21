"""Terminal text utilities: width measurement and column-based truncation.

Widths are measured in terminal cells. ANSI SGR sequences are zero width,
East Asian wide characters and emoji take two cells, combining marks
take none. Text is measured one grapheme cluster at a time.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# CSI sequences: ESC[ <params> <final byte>
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def is_control_char(ch: str) -> bool:
    cp = ord(ch)
    return cp < 0x20 or cp == 0x7F or 0x80 <= cp <= 0x9F


def char_width(ch: str) -> int:
    """Return the terminal width of a single code point (never negative)."""
    if is_control_char(ch):
        return 0
    return max(_wcwidth.wcwidth(ch), 0)


def grapheme_width(cluster: str) -> int:
    """Return the terminal width of one grapheme cluster.

    Emoji sequences (VS16, ZWJ joins, skin tones, flags) take two cells.
    Any other cluster is as wide as its base character.
    """
    if len(cluster) <= 1:
        return char_width(cluster) if cluster else 0

    for ch in cluster:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    base = cluster[0]
    if ord(base) >= 0x1F000 or 0x2600 <= ord(base) <= 0x27BF:
        return 2
    if unicodedata.category(base)[0] == "M" or unicodedata.category(base) == "Cf":
        return 0
    return char_width(base)


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    * Strips ANSI escape sequences.
    * Uses a fast ASCII path when possible.
    * Measures everything else per grapheme cluster, with a cache.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    return _cache_width(stripped, sum(grapheme_width(g) for g in grapheme.graphemes(stripped)))


def take_columns(text: str, max_cols: int) -> str:
    """Return the longest prefix of plain *text* fitting in *max_cols* cells.

    Grapheme clusters are never split.
    """
    cols = 0
    end = 0
    for cluster in grapheme.graphemes(text):
        w = grapheme_width(cluster)
        if cols + w > max_cols:
            break
        cols += w
        end += len(cluster)
    return text[:end]


def take_last_columns(text: str, max_cols: int) -> str:
    """Return the longest suffix of plain *text* fitting in *max_cols* cells."""
    cols = 0
    start = len(text)
    for cluster in reversed(graphemes(text)):
        w = grapheme_width(cluster)
        if cols + w > max_cols:
            break
        cols += w
        start -= len(cluster)
    return text[start:]
