"""Admin session context and the logout revocation registry."""

import logging
import time
from datetime import datetime, timezone
from threading import Lock
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger("mahjong_ledger.auth.context")

ADMIN_ROLE = "admin"


class AuthContext(BaseModel):
    """Who is calling, established from a validated admin token."""
    username: str
    role: str = ADMIN_ROLE
    token_id: str
    issued_at: datetime
    expires_at: datetime

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AuthContext":
        return cls(
            username=claims.get("sub", "admin"),
            role=claims.get("role", ""),
            token_id=claims.get("jti", ""),
            issued_at=datetime.fromtimestamp(claims.get("iat", 0), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims.get("exp", 0), tz=timezone.utc),
        )


class SessionRegistry:
    """In-memory set of revoked token ids.

    Entries are kept only until the token would have expired anyway.
    """

    def __init__(self) -> None:
        self._revoked: dict[str, float] = {}
        self._lock = Lock()

    def _purge(self, now: float) -> None:
        expired = [jti for jti, exp in self._revoked.items() if exp <= now]
        for jti in expired:
            del self._revoked[jti]

    def revoke(self, context: AuthContext) -> None:
        if not context.token_id:
            return
        with self._lock:
            self._purge(time.time())
            self._revoked[context.token_id] = context.expires_at.timestamp()
        logger.info("Revoked session for user=%s", context.username)

    def is_revoked(self, token_id: str) -> bool:
        with self._lock:
            self._purge(time.time())
            return token_id in self._revoked

    def reset(self) -> None:
        """Forget every revocation. Used for testing."""
        with self._lock:
            self._revoked.clear()


session_registry = SessionRegistry()
