#!/usr/bin/env python
"""Spotify OAuth endpoints used by the mobile client to obtain tokens."""

from __future__ import annotations

import logging
from html import escape
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from flask import Blueprint, jsonify, redirect, request

from src.domain.errors import InvalidRequest, SessionNotFound
from src.interfaces.http.dependencies import session_store, spotify_auth
from src.models.dto import RefreshTokenRequest, StartAuthRequest

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth_bp", __name__, url_prefix="/auth")

_COMPLETE_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>Spotify Auth Complete</title>
  </head>
  <body>
    <p>Authentication complete. You may close this window.</p>
    <p hidden id="state">%s</p>
    <script>
      window.close();
    </script>
  </body>
</html>"""


def _with_state(redirect_uri: str, state: str) -> str:
    parts = urlsplit(redirect_uri)
    query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != "state"]
    query.append(("state", state))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


@auth_bp.route("/start", methods=["POST"])
def start_auth():
    payload = StartAuthRequest.model_validate(request.get_json(silent=True) or {})
    store = session_store()
    state = store.create_state()
    store.put(state, payload.redirect_uri)
    return jsonify({"authorizeUrl": spotify_auth().authorize_url(state), "state": state})


@auth_bp.route("/callback", methods=["GET"])
async def auth_callback():
    code = request.args.get("code")
    state = request.args.get("state")
    if not code or not state:
        raise InvalidRequest("Missing code or state")

    record = session_store().get(state)
    if record is None:
        raise InvalidRequest("Invalid or expired state parameter")

    tokens = await spotify_auth().exchange_code(code)
    session_store().store_tokens(state, tokens)
    logger.info("Stored Spotify auth tokens for state %s", state)

    if record.redirect_uri:
        return redirect(_with_state(record.redirect_uri, state))
    return _COMPLETE_PAGE % escape(state), 200, {"Content-Type": "text/html; charset=utf-8"}


@auth_bp.route("/session/<state>", methods=["GET"])
def session_tokens(state: str):
    tokens = session_store().consume(state)
    if tokens is None:
        raise SessionNotFound("Session not found or already consumed")
    return jsonify(tokens.to_dict())


@auth_bp.route("/refresh", methods=["POST"])
async def refresh_token():
    payload = RefreshTokenRequest.model_validate(request.get_json(silent=True) or {})
    if not payload.refresh_token:
        raise InvalidRequest("refreshToken is required")
    tokens = await spotify_auth().refresh(payload.refresh_token)
    return jsonify(tokens.to_dict())


__all__ = ["auth_bp"]
