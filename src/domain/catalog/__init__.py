"""Catalog collaborators (playlist, artist and user lookups plus playlist mutation)."""

from .base import PlaylistCatalog
from .spotify_catalog import SpotifyCatalog

__all__ = ["PlaylistCatalog", "SpotifyCatalog"]
