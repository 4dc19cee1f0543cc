from urllib.parse import parse_qs, urlsplit

import pytest
from spotipy.oauth2 import SpotifyOauthError

from src.domain.auth import SpotifyAuthService
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


@pytest.fixture
def oauth(app):
    stub = SpotifyOAuthStub(token_info=dict(_TOKEN_INFO))
    app.extensions["spotify_auth"] = SpotifyAuthService(AppSettings(), oauth_factory=lambda: stub)
    return stub


def _start(client, redirect_uri=None):
    body = {"redirectUri": redirect_uri} if redirect_uri else {}
    r = client.post("/auth/start", json=body)
    assert r.status_code == 200
    return r.get_json()


@pytest.mark.unit
def test_start_returns_authorize_url_with_state(client, oauth):
    data = _start(client)
    assert len(data["state"]) == 32
    assert data["authorizeUrl"].endswith(f"state={data['state']}")


@pytest.mark.unit
def test_callback_redirects_back_to_app(client, oauth):
    state = _start(client, "smartsplit://auth?source=app")["state"]
    r = client.get(f"/auth/callback?code=abc&state={state}")
    assert r.status_code == 302
    location = urlsplit(r.headers["Location"])
    assert location.scheme == "smartsplit"
    assert parse_qs(location.query) == {"source": ["app"], "state": [state]}
    assert oauth.exchanged == ["abc"]


@pytest.mark.unit
def test_callback_without_redirect_renders_page(client, oauth):
    state = _start(client)["state"]
    r = client.get(f"/auth/callback?code=abc&state={state}")
    assert r.status_code == 200
    assert r.headers["Content-Type"].startswith("text/html")
    assert "Authentication complete" in r.get_data(as_text=True)


@pytest.mark.unit
def test_session_tokens_are_single_use(client, oauth):
    state = _start(client)["state"]
    client.get(f"/auth/callback?code=abc&state={state}")

    first = client.get(f"/auth/session/{state}")
    assert first.status_code == 200
    data = first.get_json()
    assert data["accessToken"] == "access-1"
    assert data["refreshToken"] == "refresh-1"
    assert data["expiresAt"] == 1700000000 * 1000

    second = client.get(f"/auth/session/{state}")
    assert second.status_code == 404


@pytest.mark.unit
def test_session_before_callback_is_not_found(client, oauth):
    state = _start(client)["state"]
    assert client.get(f"/auth/session/{state}").status_code == 404


@pytest.mark.unit
@pytest.mark.parametrize("query", ["", "?code=abc", "?state=xyz", "?code=abc&state=unknown"])
def test_callback_rejects_missing_or_unknown_state(client, oauth, query):
    r = client.get(f"/auth/callback{query}")
    assert r.status_code == 400
    assert oauth.exchanged == []


@pytest.mark.unit
def test_callback_exchange_failure_is_bad_gateway(client, oauth):
    oauth.error = SpotifyOauthError("invalid_grant")
    state = _start(client)["state"]
    r = client.get(f"/auth/callback?code=abc&state={state}")
    assert r.status_code == 502


@pytest.mark.unit
def test_refresh(client, oauth):
    r = client.post("/auth/refresh", json={"refreshToken": "refresh-old"})
    assert r.status_code == 200
    assert r.get_json()["accessToken"] == "access-1"
    assert oauth.refreshed == ["refresh-old"]


@pytest.mark.unit
def test_refresh_requires_token(client, oauth):
    r = client.post("/auth/refresh", json={})
    assert r.status_code == 400
    assert oauth.refreshed == []
