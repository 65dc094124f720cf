"""GameRecord model and the versioned row contract.

A game is persisted as one fixed-width row of 10 cells::

    [game_id, timestamp,
     east_players, east_score, south_players, south_score,
     west_players, west_score, north_players, north_score]

Players cells hold display names joined by ``" + "``. Any store adapter
converts rows through :meth:`GameRecord.from_row` / :meth:`GameRecord.to_row`
so the column order lives in exactly one place.
"""

import math
from typing import Any, Iterator, Optional

from pydantic import BaseModel, Field

from mahjong_ledger.errors import MalformedRow
from mahjong_ledger.models.common import PLAYER_SEPARATOR, SEAT_ORDER, Seat

ROW_SCHEMA_VERSION = 1
ROW_COLUMNS: tuple[str, ...] = (
    "game_id",
    "timestamp",
    "east_players",
    "east_score",
    "south_players",
    "south_score",
    "west_players",
    "west_score",
    "north_players",
    "north_score",
)
ROW_WIDTH = len(ROW_COLUMNS)


def split_player_names(cell: Any) -> list[str]:
    """Split a players cell (``"Alice + Bob"``) into trimmed names."""
    if cell is None:
        return []
    return [name.strip() for name in str(cell).split("+") if name.strip()]


def join_player_names(names: list[str]) -> str:
    return PLAYER_SEPARATOR.join(names)


def parse_score(cell: Any) -> Optional[float]:
    """Parse a score cell.

    Empty cells count as 0. Returns None for non-numeric or non-finite
    values so the caller can treat the seat as malformed.
    """
    if cell is None:
        return 0.0
    if isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        value = float(cell)
    else:
        text = str(cell).strip()
        if text == "":
            return 0.0
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return value


class SeatEntry(BaseModel):
    """One seat of one game: who sat there and the seat's signed score."""

    player_names: list[str] = Field(default_factory=list)
    score: Optional[float] = 0.0

    @property
    def is_occupied(self) -> bool:
        return bool(self.player_names)

    @property
    def players_cell(self) -> str:
        return join_player_names(self.player_names)


class GameRecord(BaseModel):
    """One finalized game."""

    game_id: str
    timestamp: str
    seats: dict[Seat, SeatEntry] = Field(default_factory=dict)

    def seat(self, seat: Seat) -> Optional[SeatEntry]:
        return self.seats.get(seat)

    def iter_seats(self) -> Iterator[tuple[Seat, SeatEntry]]:
        """Yield present seats in table order."""
        for seat in SEAT_ORDER:
            entry = self.seats.get(seat)
            if entry is not None:
                yield seat, entry

    def seat_total(self) -> float:
        """Sum of all parseable seat scores."""
        return sum(
            entry.score for _, entry in self.iter_seats()
            if entry.score is not None
        )

    @classmethod
    def from_row(cls, row: list[Any]) -> "GameRecord":
        """Build a record from a 10-cell row.

        Raises:
            MalformedRow: The row width or identity cells are invalid.
        """
        if len(row) != ROW_WIDTH:
            raise MalformedRow(
                f"Expected {ROW_WIDTH} cells, got {len(row)}", row=row
            )
        game_id = str(row[0]).strip() if row[0] is not None else ""
        if not game_id:
            raise MalformedRow("Row has no game id", row=row)

        seats: dict[Seat, SeatEntry] = {}
        for index, seat in enumerate(SEAT_ORDER):
            players_cell = row[2 + index * 2]
            score_cell = row[3 + index * 2]
            seats[seat] = SeatEntry(
                player_names=split_player_names(players_cell),
                score=parse_score(score_cell),
            )

        timestamp = "" if row[1] is None else str(row[1]).strip()
        return cls(game_id=game_id, timestamp=timestamp, seats=seats)

    def to_row(self) -> list[Any]:
        """Serialise to the 10-cell row contract."""
        row: list[Any] = [self.game_id, self.timestamp]
        for seat in SEAT_ORDER:
            entry = self.seats.get(seat) or SeatEntry()
            row.append(entry.players_cell)
            row.append("" if entry.score is None else entry.score)
        return row
