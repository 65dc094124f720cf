"""Authentication route handlers.

Endpoints:
    POST /api/auth/login     -- Admin login, returns a JWT.
    POST /api/auth/logout    -- Revoke the presented JWT.
    GET  /api/auth/validate  -- Validate a token for session restoration.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import BaseModel, Field

from mahjong_ledger.auth.context import ADMIN_ROLE, AuthContext, session_registry
from mahjong_ledger.auth.dependencies import get_auth_context, resolve_context
from mahjong_ledger.auth.jwt import create_access_token
from mahjong_ledger.config import settings
from mahjong_ledger.middleware.rate_limit import rate_limiter

logger = logging.getLogger("mahjong_ledger.routes.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class LoginRequest(BaseModel):
    """Request body for admin login."""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    """Response for a successful admin login."""
    access_token: str
    token_type: str = "bearer"
    username: str
    expires_at: str


# ---------------------------------------------------------------------------
# POST /api/auth/login
# ---------------------------------------------------------------------------

@router.post("/login", response_model=LoginResponse)
async def login(request: Request, body: LoginRequest) -> LoginResponse:
    """Authenticate the admin and return a JWT.

    Raises:
        HTTPException 401: Invalid credentials.
        HTTPException 429: Too many login attempts.
    """
    rate_limiter.check_rate_limit(request, "admin_login")

    if body.username != settings.ADMIN_USERNAME or body.password != settings.ADMIN_PASSWORD:
        # Never reveal which field was wrong.  Never log credentials.
        logger.warning("Failed admin login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = create_access_token(data={"sub": body.username, "role": ADMIN_ROLE})
    context = resolve_context(token)
    logger.info("Admin login successful for user=%s", body.username)
    return LoginResponse(
        access_token=token,
        username=body.username,
        expires_at=context.expires_at.isoformat(),
    )


# ---------------------------------------------------------------------------
# POST /api/auth/logout
# ---------------------------------------------------------------------------

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth: AuthContext = Depends(get_auth_context)) -> None:
    session_registry.revoke(auth)


# ---------------------------------------------------------------------------
# GET /api/auth/validate
# ---------------------------------------------------------------------------

@router.get("/validate")
async def validate_token(
    authorization: str | None = Header(None),
) -> dict[str, Any]:
    """Report whether a token is still usable, without raising.

    Returns:
        ``{"valid": true, "user": {...}}`` or ``{"valid": false, "error": str}``.
    """
    if authorization is None or not authorization.startswith("Bearer "):
        return {"valid": False, "error": "No authentication provided"}

    try:
        context = resolve_context(authorization[len("Bearer "):])
    except HTTPException as exc:
        logger.debug("Validate: %s", exc.detail)
        return {"valid": False, "error": exc.detail}

    return {
        "valid": True,
        "user": {
            "username": context.username,
            "role": context.role,
            "expires_at": context.expires_at.isoformat(),
        },
    }
