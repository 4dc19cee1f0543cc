"""Short-lived OAuth state bookkeeping kept in process memory."""

from __future__ import annotations

import dataclasses
import secrets
import time
from collections import OrderedDict
from threading import RLock
from typing import Any, Callable, Dict, Optional

from src.domain.errors import SessionNotFound


@dataclasses.dataclass(frozen=True)
class AuthTokens:
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    scope: str = ""
    expires_in: int = 3600
    expires_at: int = 0  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "tokenType": self.token_type,
            "scope": self.scope,
            "expiresIn": self.expires_in,
            "expiresAt": self.expires_at,
        }


@dataclasses.dataclass
class SessionRecord:
    state: str
    created_at: float
    redirect_uri: Optional[str] = None
    tokens: Optional[AuthTokens] = None


class SessionStore:
    """Interface for the OAuth state store shared across requests."""

    def create_state(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def put(self, state: str, redirect_uri: Optional[str] = None) -> SessionRecord:  # pragma: no cover - interface
        raise NotImplementedError

    def get(self, state: str) -> Optional[SessionRecord]:  # pragma: no cover - interface
        raise NotImplementedError

    def store_tokens(self, state: str, tokens: AuthTokens) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def consume(self, state: str) -> Optional[AuthTokens]:  # pragma: no cover - interface
        raise NotImplementedError

    def expire(self) -> int:  # pragma: no cover - interface
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Thread-safe state store with a fixed TTL per record.

    Expired records are dropped lazily on every operation. ``consume`` is
    read-and-clear: tokens for a state are handed out at most once.
    """

    def __init__(self, ttl_seconds: float = 600.0, clock: Callable[[], float] = time.time) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl = ttl_seconds
        self._clock = clock
        self._data: "OrderedDict[str, SessionRecord]" = OrderedDict()
        self._lock = RLock()

    def _evict_expired(self) -> int:
        now = self._clock()
        expired = [state for state, record in self._data.items() if now - record.created_at > self.ttl]
        for state in expired:
            self._data.pop(state, None)
        return len(expired)

    def create_state(self) -> str:
        return secrets.token_hex(16)

    def put(self, state: str, redirect_uri: Optional[str] = None) -> SessionRecord:
        with self._lock:
            self._evict_expired()
            record = SessionRecord(state=state, created_at=self._clock(), redirect_uri=redirect_uri)
            self._data[state] = record
            return record

    def get(self, state: str) -> Optional[SessionRecord]:
        with self._lock:
            self._evict_expired()
            return self._data.get(state)

    def store_tokens(self, state: str, tokens: AuthTokens) -> None:
        with self._lock:
            self._evict_expired()
            record = self._data.get(state)
            if record is None:
                raise SessionNotFound("Invalid or expired state parameter")
            record.tokens = tokens

    def consume(self, state: str) -> Optional[AuthTokens]:
        with self._lock:
            self._evict_expired()
            record = self._data.get(state)
            if record is None or record.tokens is None:
                return None
            del self._data[state]
            return record.tokens

    def expire(self) -> int:
        with self._lock:
            return self._evict_expired()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


__all__ = ["AuthTokens", "SessionRecord", "SessionStore", "InMemorySessionStore"]
