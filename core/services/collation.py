"""Base-level text collation for French content.

Two strings that differ only by accents or case compare equal; everything
else orders by the folded text.
"""

from __future__ import annotations

from functools import lru_cache
import unicodedata

# Letters that NFKD leaves intact but which collate as their expansion.
_EXPANSIONS = {
    "œ": "oe",
    "Œ": "oe",
    "æ": "ae",
    "Æ": "ae",
}


@lru_cache(maxsize=4096)
def collation_key(text: str) -> str:
    """Return the accent- and case-insensitive key for `text`."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    for letter, expansion in _EXPANSIONS.items():
        stripped = stripped.replace(letter, expansion)
    return stripped.casefold()


def compare_text(a: str, b: str) -> int:
    """Three-way comparison of two strings under base sensitivity."""
    ka = collation_key(a)
    kb = collation_key(b)
    return (ka > kb) - (ka < kb)
