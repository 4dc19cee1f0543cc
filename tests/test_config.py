import importlib

import pytest


@pytest.fixture
def reload_config(monkeypatch):
    import config as _config

    yield lambda: importlib.reload(_config)
    monkeypatch.undo()
    importlib.reload(_config)


def test_int_and_bool_helpers_fall_back_on_bad_values(monkeypatch, reload_config):
    monkeypatch.setenv("PORT", "not-a-number")
    monkeypatch.setenv("DEBUG", "yes")
    monkeypatch.setenv("ENABLE_CONSOLE_LOGS", "off")

    _config = reload_config()
    assert _config.Config.PORT == 4000
    assert _config.Config.DEBUG is True
    assert _config.Config.ENABLE_CONSOLE_LOGS is False


def test_cors_origins_fall_back_to_client_url(monkeypatch, reload_config):
    monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)
    monkeypatch.setenv("CLIENT_URL", "http://localhost:19006")

    _config = reload_config()
    assert _config.Config.CORS_ALLOWED_ORIGINS == ["http://localhost:19006"]


def test_cors_origins_parse_csv(monkeypatch, reload_config):
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://a.test, ,http://b.test")

    _config = reload_config()
    assert _config.Config.CORS_ALLOWED_ORIGINS == ["http://a.test", "http://b.test"]


def test_default_scopes_cover_playlist_writes_and_cover_upload(monkeypatch, reload_config):
    monkeypatch.delenv("SPOTIFY_SCOPES", raising=False)

    _config = reload_config()
    scopes = _config.Config.SPOTIFY_SCOPES.split()
    assert "playlist-modify-private" in scopes
    assert "playlist-modify-public" in scopes
    assert "ugc-image-upload" in scopes
