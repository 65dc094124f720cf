"""Store adapter interface shared by the Sheets and MongoDB backends.

Adapters speak GameRecord/RosterPlayer to callers and rows to storage.
Update and delete address exactly one row by ``game_id``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

from mahjong_ledger.errors import MalformedRow
from mahjong_ledger.models.game_record import GameRecord
from mahjong_ledger.models.player import RosterPlayer

logger = logging.getLogger("mahjong_ledger.dal.base")


def rows_to_records(rows: Iterable[list[Any]]) -> list[GameRecord]:
    """Convert stored rows, quarantining any that break the row contract."""
    records: list[GameRecord] = []
    for row in rows:
        try:
            records.append(GameRecord.from_row(row))
        except MalformedRow as exc:
            logger.warning("Quarantined malformed row %r: %s", exc.row, exc)
    return records


class GameRecordStore(ABC):
    """Persistence for game rows and the player roster."""

    # ------------------------------------------------------------------
    # Game records
    # ------------------------------------------------------------------

    @abstractmethod
    async def list_records(self) -> list[GameRecord]:
        """Return every valid data row, oldest first, header excluded."""

    @abstractmethod
    async def get_record(self, game_id: str) -> GameRecord:
        """Return one record.

        Raises:
            RecordNotFound: No row carries ``game_id``.
        """

    @abstractmethod
    async def append_record(self, record: GameRecord) -> str:
        """Append a new row and return its game id."""

    @abstractmethod
    async def update_record(self, game_id: str, record: GameRecord) -> None:
        """Overwrite the row carrying ``game_id``.

        Raises:
            RecordNotFound: No row carries ``game_id``.
        """

    @abstractmethod
    async def delete_record(self, game_id: str) -> None:
        """Remove the row carrying ``game_id``.

        Raises:
            RecordNotFound: No row carries ``game_id``.
        """

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    @abstractmethod
    async def list_players(self) -> list[RosterPlayer]:
        """Return the roster in insertion order."""

    @abstractmethod
    async def add_player(self, player: RosterPlayer) -> RosterPlayer:
        """Append a roster entry."""

    @abstractmethod
    async def delete_player(self, name: str) -> bool:
        """Remove a roster entry by exact name; False if absent."""

    async def close(self) -> None:
        """Release any held connections."""

    @abstractmethod
    async def ping(self) -> None:
        """Raise if the backing storage is unreachable."""
