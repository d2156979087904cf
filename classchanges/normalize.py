"""
Text normalization (full-width -> half-width).

Everything downstream matches on ASCII digits, ASCII class letters and the
"h" period marker, so this runs first on every announcement.
"""

from __future__ import annotations

from typing import Optional

_FULLWIDTH_OFFSET = 0xFEE0


def _build_table() -> dict[int, str]:
    table: dict[int, str] = {}
    for ascii_range in ("0123456789", "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"):
        for ch in ascii_range:
            table[ord(ch) + _FULLWIDTH_OFFSET] = ch
    # comma variants
    table[ord("、")] = ","
    table[ord("，")] = ","
    table[ord("　")] = " "
    table[ord("／")] = "/"
    # range separators as typed by a Japanese IME
    table[ord("～")] = "~"
    table[ord("－")] = "-"
    return table


# "ｈ" is covered by the lowercase range
_ZEN2HAN = _build_table()


def normalize_text(text: Optional[str]) -> str:
    """
    Map full-width digits, letters, punctuation and spaces to ASCII.

    Idempotent: normalizing an already normalized string changes nothing.
    """
    if not text:
        return ""
    return text.translate(_ZEN2HAN)
