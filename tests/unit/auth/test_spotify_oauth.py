import asyncio

import pytest
from spotipy.oauth2 import SpotifyOauthError

from src.domain.auth import SpotifyAuthService
from src.domain.auth.oauth import tokens_from_info
from src.domain.errors import OAuthExchangeError
from src.settings import AppSettings
from tests.support.stubs import SpotifyOAuthStub

_TOKEN_INFO = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "token_type": "Bearer",
    "scope": "playlist-read-private",
    "expires_in": 3600,
    "expires_at": 1700000000,
}


def _service(stub):
    return SpotifyAuthService(AppSettings(), oauth_factory=lambda: stub)


@pytest.mark.unit
def test_exchange_code_returns_tokens():
    stub = SpotifyOAuthStub(token_info=dict(_TOKEN_INFO))
    tokens = asyncio.run(_service(stub).exchange_code("code-1"))
    assert stub.exchanged == ["code-1"]
    assert tokens.access_token == "access-1"
    assert tokens.refresh_token == "refresh-1"
    assert tokens.expires_at == 1700000000 * 1000


@pytest.mark.unit
def test_exchange_code_requires_refresh_token():
    info = dict(_TOKEN_INFO)
    info.pop("refresh_token")
    with pytest.raises(OAuthExchangeError, match="refresh token"):
        asyncio.run(_service(SpotifyOAuthStub(token_info=info)).exchange_code("code-1"))


@pytest.mark.unit
def test_exchange_code_wraps_oauth_errors():
    stub = SpotifyOAuthStub(error=SpotifyOauthError("invalid_grant"))
    with pytest.raises(OAuthExchangeError) as excinfo:
        asyncio.run(_service(stub).exchange_code("bad"))
    assert excinfo.value.status_code == 502


@pytest.mark.unit
def test_refresh_keeps_previous_refresh_token():
    info = dict(_TOKEN_INFO)
    info.pop("refresh_token")
    stub = SpotifyOAuthStub(token_info=info)
    tokens = asyncio.run(_service(stub).refresh("refresh-old"))
    assert stub.refreshed == ["refresh-old"]
    assert tokens.refresh_token == "refresh-old"
    assert tokens.access_token == "access-1"


@pytest.mark.unit
def test_authorize_url_carries_state():
    url = _service(SpotifyOAuthStub()).authorize_url("abc123")
    assert "state=abc123" in url


@pytest.mark.unit
def test_default_oauth_manager_uses_settings():
    settings = AppSettings(
        spotify_client_id="cid",
        spotify_client_secret="secret",
        spotify_redirect_uri="http://localhost:4000/auth/callback",
        spotify_scopes="playlist-read-private ugc-image-upload",
    )
    url = SpotifyAuthService(settings).authorize_url("state-1")
    assert url.startswith("https://accounts.spotify.com/authorize?")
    assert "client_id=cid" in url
    assert "state=state-1" in url
    assert "show_dialog=True" in url


@pytest.mark.unit
def test_tokens_from_info_derives_expiry_when_missing():
    info = dict(_TOKEN_INFO)
    info.pop("expires_at")
    tokens = tokens_from_info(info)
    assert tokens.expires_at > 0
    assert tokens.expires_in == 3600
