import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from mealplanner.schemas.user import Role

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

# Supabase access tokens live an hour by default
CLOSED_TOKEN_TTL = 3600

AuthListener = Callable[[str, "SessionContext"], None]


@dataclass(frozen=True)
class SessionContext:
    """Who is calling. Built once per request and handed to gateways and services."""
    user_id: str
    role: Role
    access_token: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin


def _fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class SessionRegistry:
    """Session lifecycle plus the auth-change notification stream.

    Tokens closed by sign-out are remembered until they would have expired
    anyway; ``is_closed`` lets the request dependency reject them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._closed: Dict[str, float] = {}
        self._listeners: List[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def open(self, session: SessionContext) -> SessionContext:
        if session.access_token:
            with self._lock:
                self._closed.pop(_fingerprint(session.access_token), None)
        self._emit(SIGNED_IN, session)
        return session

    def close(self, session: SessionContext, expires_at: Optional[float] = None) -> None:
        if session.access_token:
            now = time.time()
            with self._lock:
                self._closed = {k: exp for k, exp in self._closed.items() if exp > now}
                self._closed[_fingerprint(session.access_token)] = expires_at or now + CLOSED_TOKEN_TTL
        self._emit(SIGNED_OUT, session)

    def is_closed(self, token: str) -> bool:
        with self._lock:
            return self._closed.get(_fingerprint(token), 0.0) > time.time()

    def _emit(self, event: str, session: SessionContext) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth listener failed for %s", event)


sessions = SessionRegistry()
