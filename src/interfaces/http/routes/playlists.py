"""Read-only playlist endpoints for the authenticated Spotify user."""

from __future__ import annotations

from flask import Blueprint, jsonify

from src.interfaces.http.dependencies import smart_split_service

playlists_bp = Blueprint("playlists_bp", __name__, url_prefix="/playlists")


@playlists_bp.route("", methods=["GET"])
async def list_playlists():
    playlists = await smart_split_service().list_playlists()
    return jsonify([playlist.to_dict() for playlist in playlists])


@playlists_bp.route("/<playlist_id>", methods=["GET"])
async def playlist_detail(playlist_id: str):
    return jsonify(await smart_split_service().playlist_detail(playlist_id))


__all__ = ["playlists_bp"]
