from __future__ import annotations

from flask import Blueprint, jsonify

from src.interfaces.http.dependencies import smart_split_service

users_bp = Blueprint("users_bp", __name__, url_prefix="/users")


@users_bp.route("/me", methods=["GET"])
async def current_user():
    user = await smart_split_service().current_user()
    return jsonify(user.to_dict())


__all__ = ["users_bp"]
