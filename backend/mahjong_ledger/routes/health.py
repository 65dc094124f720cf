"""Health check endpoint."""

import logging

from fastapi import APIRouter

from mahjong_ledger.config import settings
from mahjong_ledger.dal.store import get_store

logger = logging.getLogger("mahjong_ledger.routes.health")
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """
    Health check with a store connectivity test.

    Always returns 200 so the service can take traffic while the store is
    unreachable; the store status is reported in the body.
    """
    health_response = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "checks": {
            "store": "unknown",
            "backend": settings.STORE_BACKEND.value,
        },
    }

    try:
        await get_store().ping()
        health_response["checks"]["store"] = "ok"
    except Exception as e:
        logger.warning("Store health check failed: %s", str(e))
        health_response["checks"]["store"] = "down"
        health_response["status"] = "degraded"

    return health_response
