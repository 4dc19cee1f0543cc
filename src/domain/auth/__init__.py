"""OAuth session bookkeeping and the Spotify authorization flow."""

from .oauth import SpotifyAuthService
from .session_store import AuthTokens, InMemorySessionStore, SessionRecord, SessionStore

__all__ = [
    "AuthTokens",
    "InMemorySessionStore",
    "SessionRecord",
    "SessionStore",
    "SpotifyAuthService",
]
