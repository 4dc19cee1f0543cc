from __future__ import annotations

from typing import List, Sequence

from src.models.domain import Artist, CreatedPlaylist, PlaylistDetail, PlaylistSummary, UserProfile


class PlaylistCatalog:
    """Interface for the upstream playlist/artist catalog, scoped to one user token."""

    async def fetch_artists(self, artist_ids: Sequence[str]) -> List[Artist]:  # pragma: no cover - interface
        raise NotImplementedError

    async def fetch_playlist(self, playlist_id: str) -> PlaylistDetail:  # pragma: no cover - interface
        raise NotImplementedError

    async def fetch_user_playlists(self) -> List[PlaylistSummary]:  # pragma: no cover - interface
        raise NotImplementedError

    async def current_user(self) -> UserProfile:  # pragma: no cover - interface
        raise NotImplementedError

    async def create_playlist(
        self, owner_id: str, name: str, description: str, is_public: bool
    ) -> CreatedPlaylist:  # pragma: no cover - interface
        raise NotImplementedError

    async def add_tracks_to_playlist(self, playlist_id: str, uris: Sequence[str]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def set_playlist_cover_image(self, playlist_id: str, base64_jpeg: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


__all__ = ["PlaylistCatalog"]
