import os
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Flask specific imports ---
from flask import Flask, request, jsonify, g
from flask_cors import CORS
from pydantic import ValidationError
from spotipy.exceptions import SpotifyException

from config import Config
from src.domain.auth import InMemorySessionStore, SpotifyAuthService
from src.domain.catalog import SpotifyCatalog
from src.domain.errors import SmartSplitError
from src.domain.inference import OpenAIGenreInference
from src.interfaces.http.routes import (
    auth_bp,
    health_bp,
    playlists_bp,
    smart_split_bp,
    users_bp,
)
from src.observability import configure_structured_logging, metrics_blueprint, init_tracing
from src.settings import load_app_settings


logger = logging.getLogger(__name__)

# Spotify statuses passed through to the client; anything else is reported as a bad gateway.
PASSTHROUGH_SPOTIFY_STATUSES = {400, 401, 403, 404, 429}


def configure_logging(log_dir: str) -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set
      - Werkzeug/Flask loggers routed to root (no extra console spam)

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Preserve structured handlers; remove existing FileHandlers to avoid duplicates
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SmartSplitError)
    def _handle_domain_error(exc: SmartSplitError):
        if exc.status_code >= 500:
            app.logger.warning("Request failed: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(ValidationError)
    def _handle_validation_error(exc: ValidationError):
        details = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        return jsonify({"error": "Invalid request body", "details": details}), 400

    @app.errorhandler(SpotifyException)
    def _handle_spotify_error(exc: SpotifyException):
        status = exc.http_status if exc.http_status in PASSTHROUGH_SPOTIFY_STATUSES else 502
        app.logger.warning("Spotify request failed (status=%s): %s", exc.http_status, exc.msg)
        return jsonify({"error": exc.msg or "Spotify request failed"}), status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        # Let Flask render its own HTTP errors (404 for unknown routes, 405, ...).
        code = getattr(exc, "code", None)
        if isinstance(code, int) and 400 <= code < 600 and hasattr(exc, "get_response"):
            return jsonify({"error": getattr(exc, "description", str(exc))}), code
        app.logger.exception("Unhandled error while serving %s %s", request.method, request.path)
        return jsonify({"error": "internal_error"}), 500


def create_app(config_overrides: Optional[Dict[str, Any]] = None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_structured_logging(app)
    init_tracing(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config.get('CORS_ALLOWED_ORIGINS') or []
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(
        app,
        resources={r"/*": {"origins": allowed_origins or "*"}},
        supports_credentials=bool(allowed_origins),
        expose_headers=["X-Request-ID"],
    )

    settings = load_app_settings(app.config.get('APP_SETTINGS_OVERRIDES'))
    if not settings.spotify_configured:
        app.logger.warning(
            "Spotify OAuth is not fully configured; set SPOTIPY_CLIENT_ID, "
            "SPOTIPY_CLIENT_SECRET and SPOTIPY_REDIRECT_URI."
        )

    # Services live on app.extensions so tests can swap in fakes after create_app()
    app.extensions['app_settings'] = settings
    app.extensions['session_store'] = InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)
    app.extensions['spotify_auth'] = SpotifyAuthService(settings)
    app.extensions['genre_inference'] = OpenAIGenreInference(settings)
    app.extensions['catalog_factory'] = lambda access_token: SpotifyCatalog(access_token, settings)

    _register_error_handlers(app)

    # --- Register Blueprints ---
    app.register_blueprint(auth_bp)
    app.register_blueprint(playlists_bp)
    app.register_blueprint(smart_split_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_blueprint)

    return app


if __name__ == '__main__':
    # In debug with reloader, configure file logging only in the child process
    debug_mode = bool(Config.DEBUG)
    if not debug_mode or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(Config.LOG_DIR)
        logger.info("File logging initialized at %s", log_file_path)

    app = create_app()
    app.logger.handlers = []
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = True
    logger.info("Starting Smart Split API on port %s...", Config.PORT)
    app.run(debug=Config.DEBUG, host='0.0.0.0', port=Config.PORT, threaded=True)
