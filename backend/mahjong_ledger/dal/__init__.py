"""Data Access Layer -- store adapters and connection management."""

from mahjong_ledger.dal.base import GameRecordStore, rows_to_records
from mahjong_ledger.dal.database import (
    connect_to_mongo,
    close_mongo_connection,
    ensure_indexes,
)
from mahjong_ledger.dal.mongo_store import MongoGameStore
from mahjong_ledger.dal.sheets_client import ServiceAccountCredentials, SheetsClient
from mahjong_ledger.dal.sheets_store import SheetsGameStore
from mahjong_ledger.dal.store import close_store, get_store, open_store, use_store

__all__ = [
    # Connection management
    "connect_to_mongo",
    "close_mongo_connection",
    "ensure_indexes",
    "open_store",
    "close_store",
    "get_store",
    "use_store",
    # Store adapters
    "GameRecordStore",
    "MongoGameStore",
    "SheetsGameStore",
    "SheetsClient",
    "ServiceAccountCredentials",
    "rows_to_records",
]
