from __future__ import annotations

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health_bp", __name__)


@health_bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@health_bp.route("/readyz")
def readyz():
    settings = current_app.extensions.get("app_settings")
    inference = current_app.extensions.get("genre_inference")
    checks = {
        "spotify": "ok" if settings is not None and settings.spotify_configured else "unconfigured",
        "genre_inference": "ok" if inference is not None and inference.is_configured() else "disabled",
    }
    # Inference is optional; only missing Spotify credentials block readiness.
    ready = checks["spotify"] == "ok"
    payload = {"status": "ready" if ready else "blocked", "checks": checks}
    return jsonify(payload), 200 if ready else 503


__all__ = ["health_bp"]
