"""Lifecycle of the process-wide GameRecord store.

``open_store`` picks the adapter named by ``STORE_BACKEND`` at startup;
route handlers fetch it with ``get_store``.
"""

import logging

from mahjong_ledger.config import settings
from mahjong_ledger.dal.base import GameRecordStore
from mahjong_ledger.dal.database import (
    close_mongo_connection,
    connect_to_mongo,
    ensure_indexes,
)
from mahjong_ledger.dal.mongo_store import MongoGameStore
from mahjong_ledger.dal.sheets_client import ServiceAccountCredentials, SheetsClient
from mahjong_ledger.dal.sheets_store import SheetsGameStore
from mahjong_ledger.models.common import StoreBackend

logger = logging.getLogger("mahjong_ledger.dal.store")

_store: GameRecordStore | None = None


async def open_store() -> GameRecordStore:
    """Create the configured store adapter. Called at application startup."""
    global _store

    if settings.STORE_BACKEND == StoreBackend.MONGO:
        db = await connect_to_mongo()
        await ensure_indexes(db)
        _store = MongoGameStore(db)
    else:
        if not settings.GOOGLE_SHEET_ID:
            raise RuntimeError("GOOGLE_SHEET_ID must be set for the sheets store")
        credentials = ServiceAccountCredentials(
            settings.GOOGLE_SERVICE_ACCOUNT_EMAIL,
            settings.GOOGLE_PRIVATE_KEY,
        )
        client = SheetsClient(
            settings.GOOGLE_SHEET_ID,
            credentials,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
        _store = SheetsGameStore(
            client,
            games_sheet=settings.GAMES_SHEET_NAME,
            players_sheet=settings.PLAYERS_SHEET_NAME,
            games_has_header=settings.GAMES_SHEET_HAS_HEADER,
        )

    logger.info("Game record store ready: %s", settings.STORE_BACKEND)
    return _store


async def close_store() -> None:
    """Release the store. Called at application shutdown."""
    global _store

    if _store is not None:
        await _store.close()
        _store = None
    await close_mongo_connection()


def use_store(store: GameRecordStore | None) -> None:
    """Install a store directly (scripts and tests)."""
    global _store
    _store = store


def get_store() -> GameRecordStore:
    """Get the active store.

    Raises:
        RuntimeError: If the store is not initialized.
    """
    if _store is None:
        raise RuntimeError("Store not initialized. Call open_store() first.")
    return _store
