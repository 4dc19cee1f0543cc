"""Smart split endpoints: preview, apply, filter and genre mix creation."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from src.interfaces.http.dependencies import smart_split_service
from src.models.dto import ApplySplitRequest, CreateMixRequest, FilterGenresRequest

smart_split_bp = Blueprint("smart_split_bp", __name__, url_prefix="/smart-split")


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@smart_split_bp.route("/<playlist_id>/preview", methods=["GET"])
async def preview(playlist_id: str):
    return jsonify(await smart_split_service().preview(playlist_id))


@smart_split_bp.route("/<playlist_id>/apply", methods=["POST"])
async def apply(playlist_id: str):
    payload = ApplySplitRequest.model_validate(_json_body())
    service = smart_split_service()
    return jsonify(await service.apply(playlist_id, payload.splits, payload.description_template))


@smart_split_bp.route("/<playlist_id>/filter", methods=["POST"])
async def filter_genres(playlist_id: str):
    payload = FilterGenresRequest.model_validate(_json_body())
    return jsonify(await smart_split_service().filter(playlist_id, payload.genres))


@smart_split_bp.route("/<playlist_id>/create", methods=["POST"])
async def create_from_genres(playlist_id: str):
    payload = CreateMixRequest.model_validate(_json_body())
    service = smart_split_service()
    result = await service.create_from_genres(
        playlist_id,
        payload.genres,
        name=payload.name,
        make_public=payload.make_public,
    )
    return jsonify(result)


__all__ = ["smart_split_bp"]
