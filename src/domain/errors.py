"""Exceptions raised by the smart split domain and mapped to HTTP by the app."""

from __future__ import annotations

from typing import Any, Optional


class SmartSplitError(Exception):
    """Base class for expected, user-reportable failures."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidRequest(SmartSplitError):
    """Malformed or incomplete client input."""

    status_code = 400


class SplitValidationError(InvalidRequest):
    """User input cannot produce a split; raised before any upstream call."""


class AuthenticationRequired(SmartSplitError):
    status_code = 401


class SessionNotFound(SmartSplitError):
    status_code = 404


class OAuthExchangeError(SmartSplitError):
    status_code = 502


class InferenceResponseError(SmartSplitError):
    """The inference service answered with something that is not usable JSON."""

    status_code = 502


__all__ = [
    "SmartSplitError",
    "InvalidRequest",
    "SplitValidationError",
    "AuthenticationRequired",
    "SessionNotFound",
    "OAuthExchangeError",
    "InferenceResponseError",
]
