from __future__ import annotations

from typing import Optional

from flask import request

from src.domain.errors import AuthenticationRequired


def parse_bearer_token(header: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not header:
        raise AuthenticationRequired("Missing Authorization header")
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthenticationRequired("Authorization header must be in the format: Bearer <token>")
    return parts[1]


def require_access_token() -> str:
    """Spotify access token of the current request; raises 401 when absent."""
    return parse_bearer_token(request.headers.get("Authorization"))


__all__ = ["parse_bearer_token", "require_access_token"]
