"""FastAPI dependency-injection callables for authentication.

Use with ``Depends()`` in route signatures. Read endpoints are public; every
write goes through ``get_auth_context``.
"""

import logging

from fastapi import Header, HTTPException, status
from jose import ExpiredSignatureError, JWTError

from mahjong_ledger.auth.context import ADMIN_ROLE, AuthContext, session_registry
from mahjong_ledger.auth.jwt import decode_token

logger = logging.getLogger("mahjong_ledger.auth.dependencies")


def bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer`` header value.

    Raises:
        HTTPException 401: Header missing or not a bearer credential.
    """
    if authorization is None or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
        )
    return authorization[len("Bearer "):]


def resolve_context(token: str) -> AuthContext:
    """Validate a token and build its AuthContext.

    Raises:
        HTTPException 401: Token expired, invalid or revoked.
        HTTPException 403: Token is valid but lacks the admin role.
    """
    try:
        claims = decode_token(token)
    except ExpiredSignatureError:
        logger.warning("Expired admin JWT presented")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except JWTError:
        logger.warning("Invalid admin JWT presented")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    context = AuthContext.from_claims(claims)
    if session_registry.is_revoked(context.token_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has been logged out",
        )
    if context.role != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return context


async def get_auth_context(
    authorization: str | None = Header(None),
) -> AuthContext:
    """Require an admin session on the request."""
    return resolve_context(bearer_token(authorization))
