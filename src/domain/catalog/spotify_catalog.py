import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import spotipy
from spotipy.exceptions import SpotifyException

from src.models.domain import (
    AlbumRef,
    Artist,
    ArtistRef,
    CreatedPlaylist,
    Image,
    PlaylistDetail,
    PlaylistSummary,
    Track,
    UserProfile,
)
from src.settings import AppSettings

from .base import PlaylistCatalog

logger = logging.getLogger(__name__)

# Playlist metadata only; items are paged separately.
_PLAYLIST_FIELDS = "id,name,description,uri,public,images,owner,tracks.total"


def _map_images(raw_images: Optional[Iterable[Dict[str, Any]]]) -> tuple:
    images = []
    for raw in raw_images or ():
        if raw and raw.get("url"):
            images.append(Image(url=raw["url"], height=raw.get("height"), width=raw.get("width")))
    return tuple(images)


def _map_user(raw: Optional[Dict[str, Any]]) -> Optional[UserProfile]:
    if not raw or not raw.get("id"):
        return None
    return UserProfile(id=raw["id"], display_name=raw.get("display_name"))


def _map_playlist(raw: Dict[str, Any]) -> PlaylistSummary:
    return PlaylistSummary(
        id=raw["id"],
        name=raw.get("name") or "",
        description=raw.get("description") or "",
        uri=raw.get("uri"),
        is_public=raw.get("public"),
        images=_map_images(raw.get("images")),
        owner=_map_user(raw.get("owner")),
        track_total=int((raw.get("tracks") or {}).get("total") or 0),
    )


def _map_track(item: Optional[Dict[str, Any]]) -> Optional[Track]:
    """Map one playlist item; episodes, local files and removed tracks yield ``None``."""
    track = (item or {}).get("track")
    if not track or track.get("type", "track") != "track" or not track.get("id"):
        return None
    album = track.get("album") or {}
    return Track(
        id=track["id"],
        name=track.get("name") or "",
        uri=track.get("uri") or "",
        artists=tuple(
            ArtistRef(id=artist.get("id") or "", name=artist.get("name") or "")
            for artist in track.get("artists") or ()
        ),
        album=AlbumRef(
            id=album.get("id"),
            name=album.get("name") or "",
            images=_map_images(album.get("images")),
        ),
        duration_ms=int(track.get("duration_ms") or 0),
        preview_url=track.get("preview_url"),
    )


class SpotifyCatalog(PlaylistCatalog):
    """Spotify Web API catalog bound to a single user access token.

    spotipy is synchronous; every call is pushed to a worker thread so the
    event loop serving the request stays free while Spotify answers.
    """

    def __init__(self, access_token: str, settings: AppSettings, spotify_client: Optional[spotipy.Spotify] = None):
        self._settings = settings
        self.sp = spotify_client or spotipy.Spotify(
            auth=access_token,
            requests_timeout=settings.requests_timeout,
            retries=3,
        )

    async def _call_spotify(self, action: str, call: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(call)
        except SpotifyException as exc:
            logger.error("Spotify API call failed during %s: %s (status=%s)", action, exc.msg, exc.http_status)
            raise
        except Exception as exc:
            logger.error("Unexpected error during %s: %s", action, exc, exc_info=True)
            raise

    async def _collect_pages(self, action: str, first_page: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = first_page
        while page:
            items.extend(page.get("items") or [])
            if not page.get("next"):
                break
            page = await self._call_spotify(action, lambda current=page: self.sp.next(current))
        return items

    async def fetch_artists(self, artist_ids: Sequence[str]) -> List[Artist]:
        ids = [artist_id for artist_id in artist_ids if artist_id]
        if not ids:
            return []
        response = await self._call_spotify(
            f"fetch {len(ids)} artists",
            lambda: self.sp.artists(ids),
        )
        artists = []
        for raw in (response or {}).get("artists") or []:
            if raw and raw.get("id"):
                artists.append(Artist(id=raw["id"], name=raw.get("name") or "", genres=tuple(raw.get("genres") or ())))
        return artists

    async def fetch_playlist(self, playlist_id: str) -> PlaylistDetail:
        raw_playlist = await self._call_spotify(
            f"fetch playlist {playlist_id}",
            lambda: self.sp.playlist(playlist_id, fields=_PLAYLIST_FIELDS),
        )
        first_page = await self._call_spotify(
            f"fetch items of playlist {playlist_id}",
            lambda: self.sp.playlist_items(
                playlist_id,
                limit=self._settings.page_size,
                offset=0,
                additional_types=("track",),
            ),
        )
        items = await self._collect_pages(f"page through playlist {playlist_id}", first_page)

        tracks = [track for track in (_map_track(item) for item in items) if track is not None]
        skipped = len(items) - len(tracks)
        if skipped:
            logger.debug("Skipped %d non-track items in playlist %s", skipped, playlist_id)
        return PlaylistDetail(playlist=_map_playlist(raw_playlist), tracks=tuple(tracks))

    async def fetch_user_playlists(self) -> List[PlaylistSummary]:
        first_page = await self._call_spotify(
            "list current user playlists",
            lambda: self.sp.current_user_playlists(limit=self._settings.page_size, offset=0),
        )
        items = await self._collect_pages("page through current user playlists", first_page)
        return [_map_playlist(raw) for raw in items if raw and raw.get("id")]

    async def current_user(self) -> UserProfile:
        raw = await self._call_spotify("fetch current user profile", self.sp.current_user)
        return UserProfile(id=raw["id"], display_name=raw.get("display_name"))

    async def create_playlist(self, owner_id: str, name: str, description: str, is_public: bool) -> CreatedPlaylist:
        raw = await self._call_spotify(
            f"create playlist '{name}'",
            lambda: self.sp.user_playlist_create(owner_id, name, public=is_public, description=description),
        )
        logger.info("Created playlist %s for user %s", raw.get("id"), owner_id, extra={"playlist_id": raw.get("id")})
        return CreatedPlaylist(
            id=raw["id"],
            name=raw.get("name") or name,
            uri=raw.get("uri"),
            is_public=raw.get("public", is_public),
        )

    async def add_tracks_to_playlist(self, playlist_id: str, uris: Sequence[str]) -> None:
        if not uris:
            return
        chunk_size = self._settings.add_tracks_chunk_size
        pending = list(uris)
        for start in range(0, len(pending), chunk_size):
            chunk = pending[start:start + chunk_size]
            await self._call_spotify(
                f"add {len(chunk)} tracks to playlist {playlist_id}",
                lambda chunk=chunk: self.sp.playlist_add_items(playlist_id, chunk),
            )

    async def set_playlist_cover_image(self, playlist_id: str, base64_jpeg: str) -> None:
        await self._call_spotify(
            f"upload cover image for playlist {playlist_id}",
            lambda: self.sp.playlist_upload_cover_image(playlist_id, base64_jpeg),
        )


__all__ = ["SpotifyCatalog"]
