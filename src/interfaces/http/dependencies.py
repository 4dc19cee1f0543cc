"""Accessors for the services registered on ``app.extensions`` by ``create_app``."""

from __future__ import annotations

from flask import current_app

from src.domain.auth import SessionStore, SpotifyAuthService
from src.domain.splits import SmartSplitService
from src.support.identity import require_access_token


def session_store() -> SessionStore:
    return current_app.extensions["session_store"]


def spotify_auth() -> SpotifyAuthService:
    return current_app.extensions["spotify_auth"]


def smart_split_service() -> SmartSplitService:
    """Service bound to the bearer token of the current request."""
    access_token = require_access_token()
    catalog = current_app.extensions["catalog_factory"](access_token)
    return SmartSplitService(
        catalog,
        current_app.extensions["genre_inference"],
        current_app.extensions["app_settings"],
    )


__all__ = ["session_store", "spotify_auth", "smart_split_service"]
