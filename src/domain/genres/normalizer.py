"""Canonical display form for genre strings.

Catalog tags and model output arrive in arbitrary casing and sometimes as
placeholders ("n/a", "misc", ...). Everything that leaves the resolver goes
through :func:`normalize` so a placeholder never surfaces as a genre.
"""

from __future__ import annotations

from typing import Optional

DEFAULT_GENRE = "Pop"
UNKNOWN_LABEL = "Unknown"

PLACEHOLDER_GENRES = frozenset({
    "unknown",
    "unknown genre",
    "n/a",
    "none",
    "misc",
    "other",
    "tbd",
    "???",
})


def _title_word(word: str) -> str:
    # Title-casing one character can yield several ("ß" -> "Ss", "ŉ" -> "ʼN");
    # only the first of them stays capitalized.
    head = word[:1].title()
    return head[:1] + (head[1:] + word[1:]).lower()


def _title_case(text: str) -> str:
    return " ".join(_title_word(word) for word in text.split())


def normalize(raw: Optional[str]) -> Optional[str]:
    """Return the display form of ``raw`` or ``None`` when it is blank or a placeholder."""
    if not raw:
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None
    if " ".join(trimmed.lower().split()) in PLACEHOLDER_GENRES:
        return None
    return _title_case(trimmed)


def is_genre_missing(raw: Optional[str]) -> bool:
    return normalize(raw) is None


def ensure_genre(raw: Optional[str]) -> str:
    """Like :func:`normalize` but never empty: falls back to :data:`DEFAULT_GENRE`."""
    return normalize(raw) or DEFAULT_GENRE


def normalize_key(genre: Optional[str]) -> str:
    """Comparison key for genre equality. Never use it for display."""
    return ensure_genre(genre).lower()


def format_genre_label(raw: Optional[str]) -> str:
    """Title-cased label for names and descriptions; blank input reads as ``Unknown``."""
    if not raw or not raw.strip():
        return UNKNOWN_LABEL
    return _title_case(raw)


__all__ = [
    "DEFAULT_GENRE",
    "UNKNOWN_LABEL",
    "PLACEHOLDER_GENRES",
    "normalize",
    "is_genre_missing",
    "ensure_genre",
    "normalize_key",
    "format_genre_label",
]
