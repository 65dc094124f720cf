"""Game record business logic service.

Handles score entry validation, game id generation, history listing and
the administrator's corrective update/delete. Sits between route
handlers and the store adapter.
"""

import logging
import math
import random
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import HTTPException, status

from mahjong_ledger.dal.base import GameRecordStore
from mahjong_ledger.errors import RecordNotFound, ScoreValidationError
from mahjong_ledger.models.common import SEAT_ORDER, ZERO_SUM_TOLERANCE, Seat
from mahjong_ledger.models.game_record import GameRecord, SeatEntry
from mahjong_ledger.services.aggregator import filter_by_date_range

logger = logging.getLogger("mahjong_ledger.services.game")

# Characters for game id generation.
# Excludes ambiguous characters: I, O, 0, 1
_ID_CHARS = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
_ID_LENGTH = 6
_MAX_ID_RETRIES = 10
MAX_PLAYERS_PER_SEAT = 2
MIN_OCCUPIED_SEATS = 2


def validate_seat_scores(seats: dict[Seat, SeatEntry]) -> None:
    """Enforce the score-entry rules before anything is written.

    Raises:
        ScoreValidationError: Describing the first broken rule.
    """
    occupied = 0
    total = 0.0
    for seat in SEAT_ORDER:
        entry = seats.get(seat) or SeatEntry()
        if entry.score is None or not math.isfinite(entry.score):
            raise ScoreValidationError(f"{seat} has no valid score")
        for name in entry.player_names:
            # "+" joins shared-seat names in the players cell.
            if "+" in name:
                raise ScoreValidationError(
                    f"{seat}: player name {name!r} may not contain '+'"
                )
        if len(entry.player_names) > MAX_PLAYERS_PER_SEAT:
            raise ScoreValidationError(
                f"{seat} has {len(entry.player_names)} players; "
                f"at most {MAX_PLAYERS_PER_SEAT} may share a seat"
            )
        if len(set(entry.player_names)) != len(entry.player_names):
            raise ScoreValidationError(f"{seat} lists the same player twice")
        if entry.player_names:
            occupied += 1
        elif entry.score != 0:
            raise ScoreValidationError(f"{seat} is empty but has a score")
        total += entry.score

    if occupied < MIN_OCCUPIED_SEATS:
        raise ScoreValidationError(
            f"At least {MIN_OCCUPIED_SEATS} seats must have players"
        )

    names = [n for s in SEAT_ORDER for n in (seats.get(s) or SeatEntry()).player_names]
    if len(set(names)) != len(names):
        raise ScoreValidationError("A player cannot sit in two seats")

    if abs(total) > ZERO_SUM_TOLERANCE:
        raise ScoreValidationError(
            f"Scores must sum to zero (currently {total:.2f})"
        )


class GameService:
    """Service layer for game record operations."""

    def __init__(self, store: GameRecordStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_or_400(seats: dict[Seat, SeatEntry]) -> None:
        try:
            validate_seat_scores(seats)
        except ScoreValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            )

    async def generate_game_id(self) -> str:
        """Generate a unique 6-character game id.

        Uses unambiguous characters (no I, O, 0, 1). Checks the store for
        uniqueness and retries up to 10 times.

        Raises:
            HTTPException 500: If unable to generate a unique id after
                               maximum retries.
        """
        existing = {record.game_id for record in await self._store.list_records()}
        for attempt in range(_MAX_ID_RETRIES):
            game_id = "".join(random.choices(_ID_CHARS, k=_ID_LENGTH))
            if game_id not in existing:
                return game_id
            logger.warning(
                "Game id collision on attempt %d: %s", attempt + 1, game_id
            )

        logger.error("Failed to generate unique game id after %d attempts", _MAX_ID_RETRIES)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to generate a unique game id",
        )

    # ------------------------------------------------------------------
    # Score entry
    # ------------------------------------------------------------------

    async def record_game(self, seats: dict[Seat, SeatEntry]) -> GameRecord:
        """Validate and append a finalized game.

        Raises:
            HTTPException 400: Seat scores break the entry rules.
        """
        self._validate_or_400(seats)
        record = GameRecord(
            game_id=await self.generate_game_id(),
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            seats={seat: seats.get(seat) or SeatEntry() for seat in SEAT_ORDER},
        )
        await self._store.append_record(record)
        logger.info("Recorded game %s", record.game_id)
        return record

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list_records(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[GameRecord]:
        records = await self._store.list_records()
        return filter_by_date_range(records, start, end)

    async def get_record(self, game_id: str) -> GameRecord:
        """Raises HTTPException 404 when the id is unknown."""
        try:
            return await self._store.get_record(game_id)
        except RecordNotFound as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(exc),
            )

    # ------------------------------------------------------------------
    # Corrections
    # ------------------------------------------------------------------

    async def update_record(
        self,
        game_id: str,
        seats: dict[Seat, SeatEntry],
    ) -> GameRecord:
        """Replace a game's seats, keeping its id and timestamp.

        Raises:
            HTTPException 400: Seat scores break the entry rules.
            HTTPException 404: Game not found.
        """
        self._validate_or_400(seats)
        existing = await self.get_record(game_id)
        updated = GameRecord(
            game_id=existing.game_id,
            timestamp=existing.timestamp,
            seats={seat: seats.get(seat) or SeatEntry() for seat in SEAT_ORDER},
        )
        try:
            await self._store.update_record(game_id, updated)
        except RecordNotFound as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(exc),
            )
        logger.info("Corrected game %s", game_id)
        return updated

    async def delete_record(self, game_id: str) -> None:
        """Raises HTTPException 404 when the id is unknown."""
        try:
            await self._store.delete_record(game_id)
        except RecordNotFound as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(exc),
            )
        logger.info("Deleted game %s", game_id)
