"""Roster route handlers.

Endpoints:
    GET    /api/players         -- Roster with Settle Up member ids.
    POST   /api/players         -- Add a player (admin).
    DELETE /api/players/{name}  -- Remove a player (admin).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status

from mahjong_ledger.auth.context import AuthContext
from mahjong_ledger.auth.dependencies import get_auth_context
from mahjong_ledger.dal.store import get_store
from mahjong_ledger.models.player import RosterPlayer

logger = logging.getLogger("mahjong_ledger.routes.players")

router = APIRouter(prefix="/players", tags=["Players"])


@router.get("", response_model=list[RosterPlayer])
async def list_players() -> list[RosterPlayer]:
    return await get_store().list_players()


@router.post("", response_model=RosterPlayer, status_code=status.HTTP_201_CREATED)
async def add_player(
    body: RosterPlayer,
    auth: AuthContext = Depends(get_auth_context),
) -> RosterPlayer:
    """Add a roster entry.

    Raises:
        HTTPException 400: The name contains the shared-seat separator.
        HTTPException 409: A player with that name already exists.
    """
    store = get_store()
    player = RosterPlayer(
        name=body.name.strip(),
        settleup_member_id=body.settleup_member_id.strip(),
    )
    if "+" in player.name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Player names may not contain '+'",
        )
    existing = {p.name for p in await store.list_players()}
    if player.name in existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Player {player.name} already exists",
        )
    created = await store.add_player(player)
    logger.info("Player %s added by %s", created.name, auth.username)
    return created


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(
    name: str = Path(...),
    auth: AuthContext = Depends(get_auth_context),
) -> None:
    if not await get_store().delete_player(name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Player {name} not found",
        )
    logger.info("Player %s removed by %s", name, auth.username)
