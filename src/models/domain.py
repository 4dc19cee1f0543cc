"""
Domain records for playlists, tracks and artists.

Tracks are frozen: the genre overlay is attached once by the resolver through
``dataclasses.replace`` and never changes afterwards. ``to_dict`` helpers
render the camelCase payloads the mobile client consumes.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Dict, List, Optional, Tuple


class GenreSource(str, enum.Enum):
    """Where a track's genre came from."""

    CATALOG = "catalog"
    INFERRED = "inferred"
    FALLBACK = "fallback"


@dataclasses.dataclass(frozen=True)
class Image:
    url: str
    height: Optional[int] = None
    width: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "height": self.height, "width": self.width}


@dataclasses.dataclass(frozen=True)
class ArtistRef:
    id: str
    name: str


@dataclasses.dataclass(frozen=True)
class Artist:
    """Artist as reported by the catalog, including its ordered genre tags."""

    id: str
    name: str
    genres: Tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class AlbumRef:
    id: Optional[str]
    name: str
    images: Tuple[Image, ...] = ()


@dataclasses.dataclass(frozen=True)
class Track:
    id: str
    name: str
    uri: str
    artists: Tuple[ArtistRef, ...]
    album: AlbumRef
    duration_ms: int = 0
    preview_url: Optional[str] = None
    genre: Optional[str] = None
    genre_source: Optional[GenreSource] = None

    @property
    def artist_names(self) -> List[str]:
        return [artist.name for artist in self.artists]

    def with_genre(self, genre: str, source: GenreSource) -> "Track":
        return dataclasses.replace(self, genre=genre, genre_source=source)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "uri": self.uri,
            "album": {
                "id": self.album.id,
                "name": self.album.name,
                "images": [image.to_dict() for image in self.album.images],
            },
            "artists": [{"id": artist.id, "name": artist.name} for artist in self.artists],
            "genre": self.genre,
            "genreSource": (self.genre_source or GenreSource.FALLBACK).value,
            "durationMs": self.duration_ms,
            "previewUrl": self.preview_url,
        }


@dataclasses.dataclass(frozen=True)
class UserProfile:
    id: str
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name or self.id

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.label}


@dataclasses.dataclass(frozen=True)
class PlaylistSummary:
    id: str
    name: str
    description: str = ""
    uri: Optional[str] = None
    is_public: Optional[bool] = None
    images: Tuple[Image, ...] = ()
    owner: Optional[UserProfile] = None
    track_total: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "images": [image.to_dict() for image in self.images],
            "owner": {
                "id": self.owner.id if self.owner else None,
                "name": self.owner.label if self.owner else "Unknown",
            },
            "trackCount": self.track_total,
        }


@dataclasses.dataclass(frozen=True)
class PlaylistDetail:
    """A playlist together with the tracks that could be read from it."""

    playlist: PlaylistSummary
    tracks: Tuple[Track, ...] = ()


@dataclasses.dataclass(frozen=True)
class CreatedPlaylist:
    id: str
    name: str
    uri: Optional[str] = None
    is_public: Optional[bool] = None


@dataclasses.dataclass
class GenreSplit:
    genre: str
    tracks: List[Track]
    suggested_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "genre": self.genre,
            "suggestedName": self.suggested_name,
            "trackCount": len(self.tracks),
            "tracks": [track.to_dict() for track in self.tracks],
        }


@dataclasses.dataclass
class SplitPreview:
    splits: List[GenreSplit]
    suggested_mix_name: str


@dataclasses.dataclass(frozen=True)
class PlannedSplit:
    """A split instruction resolved into the exact create/append payload."""

    genre: str
    name: str
    description: str
    is_public: bool
    uris: Tuple[str, ...]


@dataclasses.dataclass
class MixPlan:
    """Single playlist creation derived from a genre selection."""

    name: str
    description: str
    is_public: bool
    genres: List[str]
    uris: List[str]
    tracks: List[Track]


@dataclasses.dataclass
class AppliedSplit:
    genre: str
    name: str
    playlist_id: Optional[str] = None
    uri: Optional[str] = None
    track_count: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if not self.succeeded:
            return {"genre": self.genre, "name": self.name, "error": self.error}
        return {
            "id": self.playlist_id,
            "name": self.name,
            "genre": self.genre,
            "trackCount": self.track_count,
            "uri": self.uri,
        }


@dataclasses.dataclass
class ApplyResult:
    outcomes: List[AppliedSplit] = dataclasses.field(default_factory=list)

    @property
    def created(self) -> List[AppliedSplit]:
        return [outcome for outcome in self.outcomes if outcome.succeeded]

    @property
    def failed(self) -> List[AppliedSplit]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": [outcome.to_dict() for outcome in self.created],
            "failed": [outcome.to_dict() for outcome in self.failed],
        }


__all__ = [
    "GenreSource",
    "Image",
    "ArtistRef",
    "Artist",
    "AlbumRef",
    "Track",
    "UserProfile",
    "PlaylistSummary",
    "PlaylistDetail",
    "CreatedPlaylist",
    "GenreSplit",
    "SplitPreview",
    "PlannedSplit",
    "MixPlan",
    "AppliedSplit",
    "ApplyResult",
]
