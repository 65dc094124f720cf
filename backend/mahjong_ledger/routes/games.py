"""Game record route handlers.

Endpoints:
    GET    /api/games                 -- Game history, optionally by date range.
    GET    /api/games/{game_id}       -- One game.
    POST   /api/games                 -- Record a finalized game (admin).
    PUT    /api/games/{game_id}       -- Correct a game (admin).
    DELETE /api/games/{game_id}       -- Delete a game (admin).
    POST   /api/games/{game_id}/settle -- Push a game to Settle Up (admin).
"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from pydantic import BaseModel, Field

from mahjong_ledger.auth.context import AuthContext
from mahjong_ledger.auth.dependencies import get_auth_context
from mahjong_ledger.clients.settleup import get_settleup_client
from mahjong_ledger.dal.store import get_store
from mahjong_ledger.models.common import SEAT_ORDER, Seat, SettlementStatus
from mahjong_ledger.models.game_record import GameRecord, SeatEntry
from mahjong_ledger.services.game_service import GameService
from mahjong_ledger.services.ledger_service import LedgerService

logger = logging.getLogger("mahjong_ledger.routes.games")

router = APIRouter(prefix="/games", tags=["Games"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_service() -> GameService:
    """Build a GameService wired to the active store."""
    return GameService(get_store())


def _get_ledger_service() -> LedgerService:
    return LedgerService(get_settleup_client(), get_store())


# ---------------------------------------------------------------------------
# Pydantic request / response schemas
# ---------------------------------------------------------------------------

class SeatInput(BaseModel):
    """One seat on the score entry form."""
    players: list[str] = Field(default_factory=list)
    score: float = 0.0

    def to_entry(self) -> SeatEntry:
        return SeatEntry(
            player_names=[name.strip() for name in self.players if name.strip()],
            score=self.score,
        )


class ScoreEntryRequest(BaseModel):
    """Request body for POST/PUT /api/games."""
    east: SeatInput = Field(default_factory=SeatInput)
    south: SeatInput = Field(default_factory=SeatInput)
    west: SeatInput = Field(default_factory=SeatInput)
    north: SeatInput = Field(default_factory=SeatInput)

    def to_seats(self) -> dict[Seat, SeatEntry]:
        return {
            Seat.EAST: self.east.to_entry(),
            Seat.SOUTH: self.south.to_entry(),
            Seat.WEST: self.west.to_entry(),
            Seat.NORTH: self.north.to_entry(),
        }


class SeatResponse(BaseModel):
    seat: str
    players: list[str]
    score: Optional[float]


class GameRecordResponse(BaseModel):
    """A game as returned by the API, seats in table order."""
    game_id: str
    timestamp: str
    seats: list[SeatResponse]
    settlement: Optional[dict[str, Any]] = None


def _to_response(
    record: GameRecord,
    settlement: Optional[dict[str, Any]] = None,
) -> GameRecordResponse:
    seats = []
    for seat in SEAT_ORDER:
        entry = record.seat(seat) or SeatEntry()
        seats.append(
            SeatResponse(seat=seat.value, players=entry.player_names, score=entry.score)
        )
    return GameRecordResponse(
        game_id=record.game_id,
        timestamp=record.timestamp,
        seats=seats,
        settlement=settlement,
    )


# ---------------------------------------------------------------------------
# GET /api/games -- History
# ---------------------------------------------------------------------------

@router.get("", response_model=list[GameRecordResponse])
async def list_games(
    start: Optional[date] = Query(None, description="Inclusive start date."),
    end: Optional[date] = Query(None, description="Inclusive end date."),
) -> list[GameRecordResponse]:
    """List games oldest first, optionally limited to a date range."""
    if start is not None and end is not None and start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end",
        )
    records = await _get_service().list_records(start, end)
    return [_to_response(record) for record in records]


@router.get("/{game_id}", response_model=GameRecordResponse)
async def get_game(game_id: str = Path(...)) -> GameRecordResponse:
    return _to_response(await _get_service().get_record(game_id))


# ---------------------------------------------------------------------------
# POST /api/games -- Score entry
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=GameRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a finalized game",
)
async def record_game(
    body: ScoreEntryRequest,
    sync_to_ledger: bool = Query(False, description="Also submit to Settle Up."),
    auth: AuthContext = Depends(get_auth_context),
) -> GameRecordResponse:
    """Record a game and optionally settle it right away.

    The game is saved even when settlement fails; the failure is reported
    in the ``settlement`` field so the operator can retry with
    ``POST /api/games/{game_id}/settle``.

    Raises:
        HTTPException 400: Seat scores break the entry rules.
    """
    record = await _get_service().record_game(body.to_seats())
    logger.info("Game %s recorded by %s", record.game_id, auth.username)

    settlement = None
    if sync_to_ledger:
        try:
            settlement = await _get_ledger_service().settle_game(record)
        except HTTPException as exc:
            logger.warning(
                "Game %s saved but settlement failed (%s)",
                record.game_id, exc.status_code,
            )
            settlement = {
                "status": SettlementStatus.FAILED,
                "game_id": record.game_id,
                "error": exc.detail,
            }
    return _to_response(record, settlement)


# ---------------------------------------------------------------------------
# PUT / DELETE /api/games/{game_id} -- Corrections
# ---------------------------------------------------------------------------

@router.put("/{game_id}", response_model=GameRecordResponse)
async def update_game(
    body: ScoreEntryRequest,
    game_id: str = Path(...),
    auth: AuthContext = Depends(get_auth_context),
) -> GameRecordResponse:
    record = await _get_service().update_record(game_id, body.to_seats())
    logger.info("Game %s corrected by %s", game_id, auth.username)
    return _to_response(record)


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(
    game_id: str = Path(...),
    auth: AuthContext = Depends(get_auth_context),
) -> None:
    await _get_service().delete_record(game_id)
    logger.info("Game %s deleted by %s", game_id, auth.username)


# ---------------------------------------------------------------------------
# POST /api/games/{game_id}/settle
# ---------------------------------------------------------------------------

@router.post("/{game_id}/settle")
async def settle_game(
    game_id: str = Path(...),
    auth: AuthContext = Depends(get_auth_context),
) -> dict[str, Any]:
    """Submit an existing game to Settle Up as one expense.

    Raises:
        HTTPException 404: Game not found.
        HTTPException 422: Some players have no Settle Up member mapping.
        HTTPException 502: Settle Up failed.
    """
    record = await _get_service().get_record(game_id)
    return await _get_ledger_service().settle_game(record)
