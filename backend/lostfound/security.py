from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional

from flask import current_app, request
from itsdangerous import BadSignature, URLSafeTimedSerializer

from .errors import Forbidden, Unauthorized


@dataclass
class Session:
    user_id: int
    username: str
    role: str
    last_seen: float


@dataclass(frozen=True)
class AuthContext:
    """Who is making the current request. Passed explicitly into service calls."""

    user_id: Optional[int] = None
    username: Optional[str] = None
    role: Optional[str] = None
    session_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


ANONYMOUS = AuthContext()


class SessionStore:
    """In-memory session registry with an inactivity timeout.

    Process-local: suitable for a single-instance deployment only.
    """

    def __init__(self, idle_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.idle_seconds = idle_seconds
        self.clock = clock
        self._sessions: Dict[str, Session] = {}
        self._lock = Lock()

    def create(self, user_id: int, username: str, role: str) -> str:
        sid = secrets.token_urlsafe(32)
        with self._lock:
            self._purge_locked()
            self._sessions[sid] = Session(int(user_id), username, role, self.clock())
        return sid

    def get(self, sid: str) -> Optional[Session]:
        now = self.clock()
        with self._lock:
            sess = self._sessions.get(sid)
            if sess is None:
                return None
            if now - sess.last_seen > self.idle_seconds:
                self._sessions.pop(sid, None)
                return None
            sess.last_seen = now
            return sess

    def revoke(self, sid: str) -> None:
        with self._lock:
            self._sessions.pop(sid, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_locked(self) -> None:
        cutoff = self.clock() - self.idle_seconds
        for sid in [k for k, s in self._sessions.items() if s.last_seen < cutoff]:
            del self._sessions[sid]


def _serializer() -> URLSafeTimedSerializer:
    # Salt provides namespace isolation for cookies
    return URLSafeTimedSerializer(secret_key=current_app.config["SECRET_KEY"], salt="session")


def sign_session_id(sid: str) -> str:
    return _serializer().dumps(sid)


def unsign_session_id(token: str) -> Optional[str]:
    try:
        sid = _serializer().loads(token)
    except BadSignature:
        return None
    return sid if isinstance(sid, str) else None


def get_session_store() -> SessionStore:
    return current_app.extensions["session_store"]


def load_auth_context() -> AuthContext:
    """Resolve the session cookie on the current request into an AuthContext."""
    token = request.cookies.get(current_app.config["SESSION_COOKIE_NAME"])
    if not token:
        return ANONYMOUS
    sid = unsign_session_id(token)
    if not sid:
        return ANONYMOUS
    sess = get_session_store().get(sid)
    if sess is None:
        return ANONYMOUS
    return AuthContext(user_id=sess.user_id, username=sess.username, role=sess.role, session_id=sid)


def require_admin(auth: AuthContext) -> None:
    if not auth.is_authenticated:
        raise Unauthorized()
    if not auth.is_admin:
        raise Forbidden("Admin access required")
