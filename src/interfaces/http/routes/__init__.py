"""Route blueprints exposed via Flask."""

from .auth import auth_bp
from .health import health_bp
from .playlists import playlists_bp
from .smart_split import smart_split_bp
from .users import users_bp

__all__ = [
    "auth_bp",
    "health_bp",
    "playlists_bp",
    "smart_split_bp",
    "users_bp",
]
