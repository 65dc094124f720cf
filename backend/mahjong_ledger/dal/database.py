"""MongoDB connection management using the Motor async driver."""

import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from mahjong_ledger.config import settings

logger = logging.getLogger("mahjong_ledger.dal.database")

# Global database client and database instances
_client: AsyncIOMotorClient | None = None
_database: AsyncIOMotorDatabase | None = None


async def connect_to_mongo() -> AsyncIOMotorDatabase:
    """Establish connection to MongoDB and return the database.

    Called during application startup when ``STORE_BACKEND=mongo``.
    """
    global _client, _database

    _client = AsyncIOMotorClient(
        settings.MONGO_URL,
        serverSelectionTimeoutMS=5000  # 5 second timeout
    )
    _database = _client[settings.DATABASE_NAME]

    # Verify connection by pinging the database
    await _client.admin.command("ping")
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)
    return _database


async def close_mongo_connection() -> None:
    """Close MongoDB connection."""
    global _client, _database

    if _client:
        _client.close()
        _client = None
        _database = None
        logger.info("Closed MongoDB connection")


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the Mongo store relies on. Idempotent."""
    logger.info("Ensuring indexes for all collections...")

    # One row per game id; update/delete address a single document.
    await db.game_records.create_index(
        [("game_id", ASCENDING)],
        unique=True,
        name="uq_game_id",
    )

    # Roster lookups are by exact display name.
    await db.players.create_index(
        [("name", ASCENDING)],
        unique=True,
        name="uq_player_name",
    )

    logger.info("All indexes ensured successfully.")
