"""
Server-side session store.

The session cookie carries only an opaque id; the login payload stays
server-side. This in-memory store is process-local, so multi-process
deployments need a shared implementation behind the same interface.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
import secrets
import time

from ..config import settings


def _now() -> int:
    return int(time.time())


@dataclass
class SessionRecord:
    session_id: str
    user: Dict[str, Any]
    expires_at: int


class SessionStore:
    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds or settings.access_token_expire_minutes * 60
        self._data: Dict[str, SessionRecord] = {}

    def create(self, user: Dict[str, Any]) -> SessionRecord:
        self._sweep()
        sid = secrets.token_urlsafe(32)
        rec = SessionRecord(session_id=sid, user=dict(user), expires_at=_now() + self.ttl_seconds)
        self._data[sid] = rec
        return rec

    def get(self, session_id: str) -> Optional[SessionRecord]:
        rec = self._data.get(session_id)
        if not rec:
            return None
        if rec.expires_at < _now():
            self._data.pop(session_id, None)
            return None
        return rec

    def _sweep(self) -> None:
        # Drop sessions that expired without being read again
        now = _now()
        for sid in [sid for sid, rec in self._data.items() if rec.expires_at < now]:
            del self._data[sid]

    def destroy(self, session_id: Optional[str]) -> None:
        # Unknown or missing ids are a no-op
        if session_id:
            self._data.pop(session_id, None)


session_store = SessionStore()


def get_session_store() -> SessionStore:
    """Session store dependency."""
    return session_store
