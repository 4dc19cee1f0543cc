"""Spotify authorization-code flow on top of spotipy's OAuth manager."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

from spotipy.cache_handler import MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from src.domain.errors import OAuthExchangeError
from src.settings import AppSettings

from .session_store import AuthTokens

logger = logging.getLogger(__name__)


def tokens_from_info(token_info: Dict[str, Any], fallback_refresh_token: str = "") -> AuthTokens:
    """Build :class:`AuthTokens` from a spotipy ``token_info`` dict."""
    expires_in = int(token_info.get("expires_in") or 3600)
    expires_at = token_info.get("expires_at")
    expires_at_ms = int(expires_at) * 1000 if expires_at else int((time.time() + expires_in) * 1000)
    return AuthTokens(
        access_token=token_info["access_token"],
        refresh_token=token_info.get("refresh_token") or fallback_refresh_token,
        token_type=token_info.get("token_type") or "Bearer",
        scope=token_info.get("scope") or "",
        expires_in=expires_in,
        expires_at=expires_at_ms,
    )


class SpotifyAuthService:
    """Builds authorize URLs and exchanges/refreshes tokens against Spotify accounts."""

    def __init__(self, settings: AppSettings, oauth_factory: Optional[Callable[[], SpotifyOAuth]] = None):
        self._settings = settings
        self._oauth_factory = oauth_factory or self._build_oauth

    def _build_oauth(self) -> SpotifyOAuth:
        # A fresh manager per flow keeps tokens of different users apart.
        return SpotifyOAuth(
            client_id=self._settings.spotify_client_id,
            client_secret=self._settings.spotify_client_secret,
            redirect_uri=self._settings.spotify_redirect_uri,
            scope=self._settings.scope_string,
            cache_handler=MemoryCacheHandler(),
            show_dialog=True,
            requests_timeout=self._settings.requests_timeout,
        )

    def authorize_url(self, state: str) -> str:
        return self._oauth_factory().get_authorize_url(state=state)

    async def exchange_code(self, code: str) -> AuthTokens:
        oauth = self._oauth_factory()
        try:
            token_info = await asyncio.to_thread(oauth.get_access_token, code, as_dict=True, check_cache=False)
        except SpotifyOauthError as exc:
            logger.error("Spotify authorization code exchange failed: %s", exc)
            raise OAuthExchangeError("Spotify token exchange failed", details=str(exc)) from exc

        if not token_info or not token_info.get("access_token"):
            raise OAuthExchangeError("Spotify token endpoint returned no access token")
        tokens = tokens_from_info(token_info)
        if not tokens.refresh_token:
            raise OAuthExchangeError(
                "Spotify did not return a refresh token. Ensure requested scopes allow offline access."
            )
        return tokens

    async def refresh(self, refresh_token: str) -> AuthTokens:
        oauth = self._oauth_factory()
        try:
            token_info = await asyncio.to_thread(oauth.refresh_access_token, refresh_token)
        except SpotifyOauthError as exc:
            logger.warning("Spotify token refresh failed: %s", exc)
            raise OAuthExchangeError("Spotify token refresh failed", details=str(exc)) from exc

        if not token_info or not token_info.get("access_token"):
            raise OAuthExchangeError("Spotify token endpoint returned no access token")
        return tokens_from_info(token_info, fallback_refresh_token=refresh_token)


__all__ = ["SpotifyAuthService", "tokens_from_info"]
