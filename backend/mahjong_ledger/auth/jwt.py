"""JWT token utilities for admin sessions.

HS256 with the shared ``JWT_SECRET``. Every token carries ``sub``, ``role``,
``jti``, ``exp`` and ``iat`` claims; the ``jti`` is what logout revokes.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from mahjong_ledger.config import settings

logger = logging.getLogger("mahjong_ledger.auth.jwt")

ALGORITHM = "HS256"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token.

    Args:
        data: Claims to embed in the token.  Must include at least ``sub``.
        expires_delta: Custom token lifetime.  Defaults to ``SESSION_HOURS``.

    Returns:
        A compact JWS string.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.SESSION_HOURS))

    to_encode.update({"exp": expire, "iat": now, "jti": uuid.uuid4().hex})
    token = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=ALGORITHM)
    logger.debug("Created JWT for sub=%s, expires=%s", data.get("sub"), expire.isoformat())
    return token


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        ExpiredSignatureError: If the token has expired.
        JWTError: If the token is malformed or the signature is invalid.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
