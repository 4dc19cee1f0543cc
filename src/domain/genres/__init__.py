"""Genre normalization and the resolution cascade."""

from .normalizer import (
    DEFAULT_GENRE,
    ensure_genre,
    format_genre_label,
    is_genre_missing,
    normalize,
    normalize_key,
)
from .resolver import GenreResolver, ResolutionStatus

__all__ = [
    "DEFAULT_GENRE",
    "ensure_genre",
    "format_genre_label",
    "is_genre_missing",
    "normalize",
    "normalize_key",
    "GenreResolver",
    "ResolutionStatus",
]
