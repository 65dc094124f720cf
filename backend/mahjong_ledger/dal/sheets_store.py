"""Google Sheets-backed GameRecord store.

Games live on one sheet (one row per game, columns A-J), the roster on
another (``Name``, ``SettleUpMemberID``). Deletes clear the row in place
rather than shifting the rows below it, so row numbers found by a scan
stay valid for the single-row write that follows.
"""

import logging
from typing import Any, Optional

from mahjong_ledger.dal.base import GameRecordStore, rows_to_records
from mahjong_ledger.dal.sheets_client import SheetsClient
from mahjong_ledger.errors import RecordNotFound
from mahjong_ledger.models.game_record import ROW_WIDTH, GameRecord
from mahjong_ledger.models.player import RosterPlayer

logger = logging.getLogger("mahjong_ledger.dal.sheets_store")

GAME_LAST_COLUMN = "J"
ROSTER_LAST_COLUMN = "B"


def _is_blank(row: list[Any]) -> bool:
    return all(cell is None or str(cell).strip() == "" for cell in row)


def _pad(row: list[Any], width: int) -> list[Any]:
    # The Values API omits trailing empty cells.
    if len(row) < width:
        return list(row) + [""] * (width - len(row))
    return list(row)


class SheetsGameStore(GameRecordStore):
    """Store adapter over the Sheets Values API."""

    def __init__(
        self,
        client: SheetsClient,
        games_sheet: str = "Sheet1",
        players_sheet: str = "Players",
        games_has_header: bool = True,
    ) -> None:
        self._client = client
        self._games_sheet = games_sheet
        self._players_sheet = players_sheet
        self._header_rows = 1 if games_has_header else 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _games_range(self) -> str:
        return f"{self._games_sheet}!A1:{GAME_LAST_COLUMN}"

    def _game_row_range(self, row_number: int) -> str:
        return f"{self._games_sheet}!A{row_number}:{GAME_LAST_COLUMN}{row_number}"

    async def _game_rows(self) -> list[tuple[int, list[Any]]]:
        """(sheet row number, padded row) for every non-blank data row."""
        values = await self._client.get_values(self._games_range())
        rows: list[tuple[int, list[Any]]] = []
        for index, row in enumerate(values):
            if index < self._header_rows or _is_blank(row):
                continue
            rows.append((index + 1, _pad(row, ROW_WIDTH)))
        return rows

    async def _find_game_row(self, game_id: str) -> tuple[int, list[Any]]:
        for row_number, row in await self._game_rows():
            if str(row[0]).strip() == game_id:
                return row_number, row
        raise RecordNotFound(game_id)

    # ------------------------------------------------------------------
    # Game records
    # ------------------------------------------------------------------

    async def list_records(self) -> list[GameRecord]:
        return rows_to_records(row for _, row in await self._game_rows())

    async def get_record(self, game_id: str) -> GameRecord:
        _, row = await self._find_game_row(game_id)
        return GameRecord.from_row(row)

    async def append_record(self, record: GameRecord) -> str:
        await self._client.append_values(
            f"{self._games_sheet}!A1", [record.to_row()]
        )
        logger.info("Appended game %s", record.game_id)
        return record.game_id

    async def update_record(self, game_id: str, record: GameRecord) -> None:
        row_number, _ = await self._find_game_row(game_id)
        await self._client.update_values(
            self._game_row_range(row_number), [record.to_row()]
        )
        logger.info("Updated game %s at row %d", game_id, row_number)

    async def delete_record(self, game_id: str) -> None:
        row_number, _ = await self._find_game_row(game_id)
        await self._client.clear_values(self._game_row_range(row_number))
        logger.info("Cleared game %s at row %d", game_id, row_number)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    async def _roster_rows(self) -> list[tuple[int, list[Any]]]:
        values = await self._client.get_values(
            f"{self._players_sheet}!A1:{ROSTER_LAST_COLUMN}"
        )
        # First roster row is always the header.
        return [
            (index + 1, _pad(row, 2))
            for index, row in enumerate(values)
            if index > 0 and not _is_blank(row)
        ]

    async def list_players(self) -> list[RosterPlayer]:
        players: list[RosterPlayer] = []
        for row_number, (name, member_id, *_) in await self._roster_rows():
            name, member_id = str(name).strip(), str(member_id).strip()
            if not name or not member_id:
                logger.warning(
                    "Roster row %d is missing a name or member id; ignored", row_number
                )
                continue
            players.append(RosterPlayer(name=name, settleup_member_id=member_id))
        return players

    async def add_player(self, player: RosterPlayer) -> RosterPlayer:
        await self._client.append_values(
            f"{self._players_sheet}!A1", [player.to_row()]
        )
        logger.info("Added roster player %s", player.name)
        return player

    async def delete_player(self, name: str) -> bool:
        target: Optional[int] = None
        for row_number, row in await self._roster_rows():
            if str(row[0]).strip() == name:
                target = row_number
                break
        if target is None:
            return False
        await self._client.clear_values(
            f"{self._players_sheet}!A{target}:{ROSTER_LAST_COLUMN}{target}"
        )
        logger.info("Deleted roster player %s", name)
        return True

    async def close(self) -> None:
        await self._client.close()

    async def ping(self) -> None:
        await self._client.get_values(f"{self._games_sheet}!A1:A1")
