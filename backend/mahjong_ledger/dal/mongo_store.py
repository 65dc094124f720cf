"""MongoDB-backed GameRecord store.

Each game is one document holding the 10-cell row verbatim, so rows go
through the same contract as the spreadsheet backend. Documents are
listed in insertion (``_id``) order.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from mahjong_ledger.dal.base import GameRecordStore, rows_to_records
from mahjong_ledger.errors import RecordNotFound
from mahjong_ledger.models.game_record import ROW_SCHEMA_VERSION, GameRecord
from mahjong_ledger.models.player import RosterPlayer

logger = logging.getLogger("mahjong_ledger.dal.mongo_store")

RECORDS_COLLECTION = "game_records"
PLAYERS_COLLECTION = "players"


def _record_doc(record: GameRecord) -> dict:
    return {
        "game_id": record.game_id,
        "schema_version": ROW_SCHEMA_VERSION,
        "row": record.to_row(),
    }


class MongoGameStore(GameRecordStore):
    """Store adapter for the ``game_records`` and ``players`` collections."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db
        self._records = db[RECORDS_COLLECTION]
        self._players = db[PLAYERS_COLLECTION]

    # ------------------------------------------------------------------
    # Game records
    # ------------------------------------------------------------------

    async def list_records(self) -> list[GameRecord]:
        cursor = self._records.find().sort("_id", ASCENDING)
        rows = [doc.get("row", []) async for doc in cursor]
        return rows_to_records(rows)

    async def get_record(self, game_id: str) -> GameRecord:
        doc = await self._records.find_one({"game_id": game_id})
        if doc is None:
            raise RecordNotFound(game_id)
        return GameRecord.from_row(doc["row"])

    async def append_record(self, record: GameRecord) -> str:
        await self._records.insert_one(_record_doc(record))
        logger.info("Appended game %s", record.game_id)
        return record.game_id

    async def update_record(self, game_id: str, record: GameRecord) -> None:
        result = await self._records.replace_one(
            {"game_id": game_id}, _record_doc(record)
        )
        if result.matched_count == 0:
            raise RecordNotFound(game_id)
        logger.info("Updated game %s", game_id)

    async def delete_record(self, game_id: str) -> None:
        result = await self._records.delete_one({"game_id": game_id})
        if result.deleted_count == 0:
            raise RecordNotFound(game_id)
        logger.info("Deleted game %s", game_id)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    async def list_players(self) -> list[RosterPlayer]:
        cursor = self._players.find().sort("_id", ASCENDING)
        return [
            RosterPlayer(
                name=doc["name"],
                settleup_member_id=doc["settleup_member_id"],
            )
            async for doc in cursor
        ]

    async def add_player(self, player: RosterPlayer) -> RosterPlayer:
        await self._players.insert_one(player.model_dump())
        logger.info("Added roster player %s", player.name)
        return player

    async def delete_player(self, name: str) -> bool:
        result = await self._players.delete_one({"name": name})
        if result.deleted_count > 0:
            logger.info("Deleted roster player %s", name)
        return result.deleted_count > 0

    async def ping(self) -> None:
        await self._db.command("ping")
