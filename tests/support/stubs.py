"""Shared test stubs for the Spotify catalog, OpenAI and OAuth collaborators."""

import copy
from types import SimpleNamespace
from typing import Dict, Iterable, List, Optional, Sequence

from src.domain.catalog.base import PlaylistCatalog
from src.domain.inference.base import GenreInference
from src.models.domain import (
    Artist,
    CreatedPlaylist,
    PlaylistDetail,
    PlaylistSummary,
    UserProfile,
)


class FakeCatalog(PlaylistCatalog):
    """In-memory catalog recording every call made against it."""

    def __init__(
        self,
        playlist: Optional[PlaylistDetail] = None,
        artists: Optional[Iterable[Artist]] = None,
        user: Optional[UserProfile] = None,
        playlists: Optional[Sequence[PlaylistSummary]] = None,
        fail_create_for: Iterable[str] = (),
        artist_error: Optional[Exception] = None,
        cover_error: Optional[Exception] = None,
    ):
        self.playlist = playlist
        self.artists = {artist.id: artist for artist in artists or ()}
        self.user = user or UserProfile(id="user-1", display_name="Test User")
        self.playlists = list(playlists or ())
        self.fail_create_for = set(fail_create_for)
        self.artist_error = artist_error
        self.cover_error = cover_error

        self.artist_requests: List[List[str]] = []
        self.fetch_playlist_calls: List[str] = []
        self.created: List[dict] = []
        self.added: List[tuple] = []
        self.covers: List[tuple] = []
        self.calls: List[str] = []

    async def fetch_artists(self, artist_ids):
        self.calls.append("fetch_artists")
        self.artist_requests.append(list(artist_ids))
        if self.artist_error:
            raise self.artist_error
        return [self.artists[artist_id] for artist_id in artist_ids if artist_id in self.artists]

    async def fetch_playlist(self, playlist_id):
        self.calls.append("fetch_playlist")
        self.fetch_playlist_calls.append(playlist_id)
        return self.playlist

    async def fetch_user_playlists(self):
        self.calls.append("fetch_user_playlists")
        return list(self.playlists)

    async def current_user(self):
        self.calls.append("current_user")
        return self.user

    async def create_playlist(self, owner_id, name, description, is_public):
        self.calls.append("create_playlist")
        if name in self.fail_create_for:
            raise RuntimeError(f"cannot create {name}")
        playlist_id = f"new-{len(self.created) + 1}"
        self.created.append(
            {"owner_id": owner_id, "name": name, "description": description, "is_public": is_public, "id": playlist_id}
        )
        return CreatedPlaylist(id=playlist_id, name=name, uri=f"spotify:playlist:{playlist_id}", is_public=is_public)

    async def add_tracks_to_playlist(self, playlist_id, uris):
        self.calls.append("add_tracks_to_playlist")
        self.added.append((playlist_id, list(uris)))

    async def set_playlist_cover_image(self, playlist_id, base64_jpeg):
        self.calls.append("set_playlist_cover_image")
        if self.cover_error:
            raise self.cover_error
        self.covers.append((playlist_id, base64_jpeg))


class FakeInference(GenreInference):
    """Scripted inference collaborator."""

    def __init__(
        self,
        configured: bool = True,
        batch: Optional[Dict[str, str]] = None,
        batch_error: Optional[Exception] = None,
        single: Optional[Dict[str, Optional[str]]] = None,
        single_errors: Optional[Dict[str, Exception]] = None,
        cover: Optional[str] = None,
        cover_error: Optional[Exception] = None,
    ):
        self.configured = configured
        self.batch = batch or {}
        self.batch_error = batch_error
        self.single = single or {}
        self.single_errors = single_errors or {}
        self.cover = cover
        self.cover_error = cover_error

        self.batch_calls: List[List[str]] = []
        self.single_calls: List[str] = []
        self.cover_calls: List[tuple] = []

    def is_configured(self):
        return self.configured

    async def infer_genres(self, tracks):
        self.batch_calls.append([track.id for track in tracks])
        if self.batch_error:
            raise self.batch_error
        return dict(self.batch)

    async def infer_genre(self, track):
        self.single_calls.append(track.id)
        if track.id in self.single_errors:
            raise self.single_errors[track.id]
        return self.single.get(track.id)

    async def generate_cover(self, playlist_name, genres, tracks):
        self.cover_calls.append((playlist_name, list(genres), [track.id for track in tracks]))
        if self.cover_error:
            raise self.cover_error
        return self.cover


class SpotipyStub:
    """Minimal Spotipy client stub answering from canned pages."""

    def __init__(
        self,
        playlist: Optional[dict] = None,
        item_pages: Optional[Sequence[dict]] = None,
        playlist_pages: Optional[Sequence[dict]] = None,
        artists: Optional[Dict[str, dict]] = None,
        user: Optional[dict] = None,
        error: Optional[Exception] = None,
    ):
        self.playlist_payload = playlist or {}
        self.pages: Dict[str, dict] = {}
        self.first_item_page = self._chain("items", item_pages or [{"items": [], "next": None}])
        self.first_playlist_page = self._chain("playlists", playlist_pages or [{"items": [], "next": None}])
        self.artist_payloads = artists or {}
        self.user_payload = user or {"id": "user-1", "display_name": "Test User"}
        self.error = error
        self.calls: List[tuple] = []

    def _chain(self, prefix: str, pages: Sequence[dict]) -> dict:
        pages = [copy.deepcopy(page) for page in pages]
        for index, page in enumerate(pages):
            if index + 1 < len(pages):
                url = f"https://api.spotify.test/{prefix}?page={index + 1}"
                page["next"] = url
                self.pages[url] = pages[index + 1]
            else:
                page["next"] = None
        return pages[0]

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error:
            raise self.error

    def artists(self, ids):
        self._record("artists", list(ids))
        return {"artists": [self.artist_payloads.get(artist_id) for artist_id in ids]}

    def playlist(self, playlist_id, **kwargs):
        self._record("playlist", playlist_id, **kwargs)
        return self.playlist_payload

    def playlist_items(self, playlist_id, **kwargs):
        self._record("playlist_items", playlist_id, **kwargs)
        return self.first_item_page

    def current_user_playlists(self, **kwargs):
        self._record("current_user_playlists", **kwargs)
        return self.first_playlist_page

    def next(self, result):
        self._record("next", result.get("next"))
        return self.pages.get(result.get("next"))

    def current_user(self):
        self._record("current_user")
        return self.user_payload

    def user_playlist_create(self, user, name, public=True, collaborative=False, description=""):
        self._record("user_playlist_create", user, name, public=public, description=description)
        return {"id": "created-1", "name": name, "uri": "spotify:playlist:created-1", "public": public}

    def playlist_add_items(self, playlist_id, items, position=None):
        self._record("playlist_add_items", playlist_id, list(items))
        return {"snapshot_id": "snap"}

    def playlist_upload_cover_image(self, playlist_id, image_b64):
        self._record("playlist_upload_cover_image", playlist_id, image_b64)


class OpenAIClientStub:
    """Async stand-in for ``openai.AsyncOpenAI`` with scripted replies."""

    def __init__(self, contents: Optional[Sequence[Optional[str]]] = None, images: Optional[Sequence[Optional[str]]] = None):
        self._contents = list(contents or [])
        self._images = list(images or [])
        self.chat_requests: List[dict] = []
        self.image_requests: List[dict] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create_completion))
        self.images = SimpleNamespace(generate=self._generate_image)

    async def _create_completion(self, **kwargs):
        self.chat_requests.append(kwargs)
        content = self._contents.pop(0) if self._contents else ""
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def _generate_image(self, **kwargs):
        self.image_requests.append(kwargs)
        image = self._images.pop(0) if self._images else None
        data = [SimpleNamespace(b64_json=image)] if image is not None else []
        return SimpleNamespace(data=data)


class SpotifyOAuthStub:
    """Replaces ``spotipy.oauth2.SpotifyOAuth`` for auth flow tests."""

    def __init__(self, token_info: Optional[dict] = None, error: Optional[Exception] = None):
        self.token_info = token_info
        self.error = error
        self.exchanged: List[str] = []
        self.refreshed: List[str] = []

    def get_authorize_url(self, state=None):
        return f"https://accounts.spotify.test/authorize?state={state}"

    def get_access_token(self, code=None, as_dict=True, check_cache=True):
        self.exchanged.append(code)
        if self.error:
            raise self.error
        return self.token_info

    def refresh_access_token(self, refresh_token):
        self.refreshed.append(refresh_token)
        if self.error:
            raise self.error
        return self.token_info


__all__ = [
    "FakeCatalog",
    "FakeInference",
    "SpotipyStub",
    "OpenAIClientStub",
    "SpotifyOAuthStub",
]
