"""
Mahjong Ledger FastAPI application entry point.

Configures logging, CORS and routes, and owns the lifecycle of the game
record store and the Settle Up client.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mahjong_ledger.clients.settleup import close_settleup_client
from mahjong_ledger.config import settings
from mahjong_ledger.dal.store import close_store, open_store
from mahjong_ledger.errors import SheetsError
from mahjong_ledger.logging_config import setup_logging
from mahjong_ledger.routes.auth import router as auth_router
from mahjong_ledger.routes.games import router as games_router
from mahjong_ledger.routes.health import router as health_router
from mahjong_ledger.routes.ledger import router as ledger_router
from mahjong_ledger.routes.players import router as players_router
from mahjong_ledger.routes.stats import router as stats_router

logger = logging.getLogger("mahjong_ledger.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup; release the store and clients on shutdown."""
    setup_logging(settings.LOG_DIR, settings.LOG_LEVEL)
    try:
        await open_store()
        logger.info("Mahjong Ledger v%s started", settings.APP_VERSION)
    except Exception as e:
        # Start anyway so /health can report the problem.
        logger.warning(
            "Failed to open the %s store during startup: %s. "
            "Store operations will fail until it is reachable.",
            settings.STORE_BACKEND.value,
            str(e),
        )

    yield

    await close_settleup_client()
    await close_store()
    logger.info("Mahjong Ledger shutdown complete")


app = FastAPI(
    title="Mahjong Ledger API",
    description="Mahjong score history, statistics and Settle Up settlement - REST API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
    max_age=600,
)


@app.exception_handler(SheetsError)
async def sheets_error_handler(request: Request, exc: SheetsError) -> JSONResponse:
    """Report a Google Sheets outage on any store read or write as a 502."""
    logger.error("Game store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"Game store unavailable: {exc}"},
    )


app.include_router(health_router)  # Health endpoint at root level
app.include_router(health_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(games_router, prefix="/api")
app.include_router(stats_router, prefix="/api")
app.include_router(players_router, prefix="/api")
app.include_router(ledger_router, prefix="/api")


@app.get("/")
async def root():
    """API information."""
    return {
        "name": "Mahjong Ledger API",
        "version": settings.APP_VERSION,
        "status": "operational",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mahjong_ledger.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
