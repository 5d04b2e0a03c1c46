"""
In-memory session tokens; lost on restart
"""
from threading import RLock
from typing import Dict, Optional

from .identifiers import generate_token


class SessionRegistry:
    """Maps opaque bearer tokens to user ids. A user may hold several tokens."""

    def __init__(self):
        self._sessions: Dict[str, str] = {}
        self._lock = RLock()

    def create(self, user_id: str) -> str:
        token = generate_token()
        with self._lock:
            self._sessions[token] = user_id
        return token

    def resolve(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)
