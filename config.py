#!/usr/bin/env python
# config.py
import os
from typing import List

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


DEFAULT_SPOTIFY_SCOPES = " ".join([
    'playlist-read-private',
    'playlist-read-collaborative',
    'playlist-modify-private',
    'playlist-modify-public',
    'ugc-image-upload',
    'user-read-private',
])


class Config:
    # Spotify API (OAuth authorization-code flow)
    SPOTIPY_CLIENT_ID = os.environ.get('SPOTIPY_CLIENT_ID')
    SPOTIPY_CLIENT_SECRET = os.environ.get('SPOTIPY_CLIENT_SECRET')
    SPOTIPY_REDIRECT_URI = os.environ.get('SPOTIPY_REDIRECT_URI')
    SPOTIFY_SCOPES = os.getenv('SPOTIFY_SCOPES', DEFAULT_SPOTIFY_SCOPES)

    # Upstream limits: /artists accepts 50 ids, /playlists/{id}/tracks accepts 100 uris
    SPOTIFY_ARTIST_BATCH_SIZE = _get_int('SPOTIFY_ARTIST_BATCH_SIZE', 50)
    SPOTIFY_ADD_TRACKS_CHUNK_SIZE = _get_int('SPOTIFY_ADD_TRACKS_CHUNK_SIZE', 100)
    SPOTIFY_PAGE_SIZE = _get_int('SPOTIFY_PAGE_SIZE', 50)
    SPOTIFY_REQUESTS_TIMEOUT = _get_int('SPOTIFY_REQUESTS_TIMEOUT', 30)

    # Genre inference / cover generation (OpenAI). Unset key disables both.
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_GENRE_MODEL = os.getenv('OPENAI_GENRE_MODEL', 'gpt-4o-mini')
    OPENAI_IMAGE_MODEL = os.getenv('OPENAI_IMAGE_MODEL', 'gpt-image-1')

    # OAuth state records are discarded after this many minutes
    AUTH_SESSION_TTL_MINUTES = _get_int('AUTH_SESSION_TTL_MINUTES', 10)

    # HTTP
    PORT = _get_int('PORT', 4000)
    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', os.getenv('CLIENT_URL', ''))

    # Runtime behavior
    # Turn Flask debug on/off from env; default off to avoid noisy console
    DEBUG = _get_bool('DEBUG', False)
    # Control console logging; when disabled, logs go only to file
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
    LOG_DIR = os.getenv('LOG_DIR', os.path.join(basedir, 'log'))

    # Observability
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
    OTEL_EXPORTER_OTLP_HEADERS = os.getenv('OTEL_EXPORTER_OTLP_HEADERS')
    OTEL_EXPORTER_OTLP_INSECURE = _get_bool('OTEL_EXPORTER_OTLP_INSECURE', True)
    OTEL_SERVICE_NAME = os.getenv('OTEL_SERVICE_NAME', 'smart-split')
