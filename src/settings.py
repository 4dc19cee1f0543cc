#!/usr/bin/env python
"""
Centralized configuration schema.

Merges defaults from config.Config with runtime overrides and clamps the
values that are bounded by upstream API limits.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config

SPOTIFY_MAX_ARTIST_BATCH = 50
SPOTIFY_MAX_ADD_TRACKS_CHUNK = 100
SPOTIFY_MAX_PAGE_SIZE = 50


def _parse_scopes(value: Optional[object]) -> List[str]:
    """Normalize scope configuration into a unique ordered list."""
    if value is None:
        tokens: List[str] = []
    elif isinstance(value, str):
        tokens = value.replace(",", " ").split()
    elif isinstance(value, (list, tuple, set)):
        tokens = [str(token).strip() for token in value]
    else:
        tokens = [str(value).strip()]

    normalized: List[str] = []
    for token in tokens:
        if token and token not in normalized:
            normalized.append(token)
    return normalized


def _clamp(value: object, upper: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return upper
    return max(1, min(number, upper))


class AppSettings(BaseModel):
    """Application-wide settings for the catalog, inference and auth layers."""

    model_config = ConfigDict(extra="ignore")

    # Spotify credentials
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    spotify_redirect_uri: Optional[str] = None
    spotify_scopes: List[str] = Field(default_factory=list)

    # Spotify request shaping
    artist_batch_size: int = SPOTIFY_MAX_ARTIST_BATCH
    add_tracks_chunk_size: int = SPOTIFY_MAX_ADD_TRACKS_CHUNK
    page_size: int = SPOTIFY_MAX_PAGE_SIZE
    requests_timeout: int = 30

    # OpenAI
    openai_api_key: Optional[str] = None
    genre_model: str = "gpt-4o-mini"
    image_model: str = "gpt-image-1"

    # Auth session bookkeeping
    session_ttl_seconds: int = 600

    @property
    def spotify_configured(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret and self.spotify_redirect_uri)

    @property
    def scope_string(self) -> str:
        return " ".join(self.spotify_scopes)

    @field_validator("spotify_scopes", mode="before")
    @classmethod
    def _normalize_scopes(cls, value: Optional[object]) -> List[str]:
        return _parse_scopes(value)

    @field_validator("artist_batch_size", mode="before")
    @classmethod
    def _clamp_artist_batch(cls, value: object) -> int:
        return _clamp(value, SPOTIFY_MAX_ARTIST_BATCH)

    @field_validator("add_tracks_chunk_size", mode="before")
    @classmethod
    def _clamp_add_chunk(cls, value: object) -> int:
        return _clamp(value, SPOTIFY_MAX_ADD_TRACKS_CHUNK)

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, value: object) -> int:
        return _clamp(value, SPOTIFY_MAX_PAGE_SIZE)

    @field_validator("session_ttl_seconds", mode="before")
    @classmethod
    def _coerce_ttl(cls, value: object) -> int:
        try:
            ttl = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 600
        return max(1, ttl)


def load_app_settings(overrides: Optional[Dict[str, Any]] = None) -> AppSettings:
    """Load settings merging config defaults with optional runtime overrides."""
    data: Dict[str, Any] = {
        "spotify_client_id": Config.SPOTIPY_CLIENT_ID,
        "spotify_client_secret": Config.SPOTIPY_CLIENT_SECRET,
        "spotify_redirect_uri": Config.SPOTIPY_REDIRECT_URI,
        "spotify_scopes": Config.SPOTIFY_SCOPES,
        "artist_batch_size": Config.SPOTIFY_ARTIST_BATCH_SIZE,
        "add_tracks_chunk_size": Config.SPOTIFY_ADD_TRACKS_CHUNK_SIZE,
        "page_size": Config.SPOTIFY_PAGE_SIZE,
        "requests_timeout": Config.SPOTIFY_REQUESTS_TIMEOUT,
        "openai_api_key": Config.OPENAI_API_KEY,
        "genre_model": Config.OPENAI_GENRE_MODEL,
        "image_model": Config.OPENAI_IMAGE_MODEL,
        "session_ttl_seconds": Config.AUTH_SESSION_TTL_MINUTES * 60,
    }
    if overrides:
        data.update(overrides)
    return AppSettings.model_validate(data)


__all__ = [
    "AppSettings",
    "load_app_settings",
]
