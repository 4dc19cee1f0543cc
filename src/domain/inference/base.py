from __future__ import annotations

from typing import Dict, Optional, Sequence

from src.models.domain import Track


class GenreInference:
    """Interface for the text-generation fallback that guesses genres.

    Both inference calls may raise or return partial results; callers are
    expected to tolerate either.
    """

    def is_configured(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    async def infer_genres(self, tracks: Sequence[Track]) -> Dict[str, str]:  # pragma: no cover - interface
        raise NotImplementedError

    async def infer_genre(self, track: Track) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    async def generate_cover(
        self, playlist_name: str, genres: Sequence[str], tracks: Sequence[Track]
    ) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError


__all__ = ["GenreInference"]
