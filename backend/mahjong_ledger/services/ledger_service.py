"""Settle Up ledger business logic service.

Signs in with the backend's own Settle Up account, maps finalized games onto
expenses and reads the group's current debts. Domain errors from the
settlement mapper and the client are translated into HTTP errors here.
"""

import asyncio
import logging
import time
from typing import Any

from fastapi import HTTPException, status

from mahjong_ledger.clients.settleup import LedgerSession, SettleUpClient
from mahjong_ledger.config import settings
from mahjong_ledger.dal.base import GameRecordStore
from mahjong_ledger.errors import (
    LedgerError,
    MalformedRow,
    PlayerNotMapped,
    SheetsError,
    UnbalancedSettlement,
)
from mahjong_ledger.models.common import SettlementStatus
from mahjong_ledger.models.game_record import GameRecord
from mahjong_ledger.models.settlement import Debt, LedgerGroup, LedgerMember, NoCreditorsSkipped
from mahjong_ledger.services.debt_normalizer import normalize
from mahjong_ledger.services.score_math import SharePolicy, raw_seat_attribution
from mahjong_ledger.services.settlement_mapper import (
    build_expense,
    directory_from_members,
    directory_from_roster,
    seat_assignments,
    to_settleup_transaction,
)

logger = logging.getLogger("mahjong_ledger.services.ledger")


def _bad_gateway(exc: LedgerError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=str(exc),
    )


class LedgerService:
    """Service layer for Settle Up operations."""

    def __init__(
        self,
        client: SettleUpClient,
        store: GameRecordStore,
        share_policy: SharePolicy = raw_seat_attribution,
    ) -> None:
        self._client = client
        self._store = store
        self._share_policy = share_policy

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _login(self) -> LedgerSession:
        return await self._client.login(
            settings.SETTLEUP_EMAIL, settings.SETTLEUP_PASSWORD
        )

    def _group_id(self) -> str:
        if not settings.SETTLEUP_GROUP_ID:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="SETTLEUP_GROUP_ID is not configured",
            )
        return settings.SETTLEUP_GROUP_ID

    async def _member_directory(self, group_id: str, token: str) -> dict[str, str]:
        if settings.SETTLEUP_DIRECTORY_SOURCE == "members":
            members = await self._client.list_members(group_id, token)
            return directory_from_members(members)
        return directory_from_roster(await self._store.list_players())

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def settle_game(self, record: GameRecord) -> dict[str, Any]:
        """Post one finalized game to the ledger as an expense.

        Returns:
            ``{"status": "SUBMITTED", "transaction_id": ...}`` or
            ``{"status": "SKIPPED", "reason": ...}`` when the game has no
            winner.

        Raises:
            HTTPException 422: Players without a ledger member mapping, or a
                seat whose stored score is unreadable.
            HTTPException 500: Seat scores do not balance.
            HTTPException 502: Settle Up or the game store failed the request.
        """
        group_id = self._group_id()
        try:
            session = await self._login()
            directory = await self._member_directory(group_id, session.token)
            result = build_expense(
                seat_assignments(record),
                directory,
                game_id=record.game_id,
                share_policy=self._share_policy,
            )
            if isinstance(result, NoCreditorsSkipped):
                return {
                    "status": SettlementStatus.SKIPPED,
                    "game_id": record.game_id,
                    "reason": result.reason,
                }
            payload = to_settleup_transaction(
                result,
                settings.SETTLEUP_CURRENCY_CODE,
                int(time.time() * 1000),
            )
            transaction_id = await self._client.submit_expense(
                group_id, session.token, payload
            )
        except PlayerNotMapped as exc:
            logger.warning("Game %s not settled: %s", record.game_id, exc)
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": str(exc), "players": exc.names},
            )
        except MalformedRow as exc:
            logger.warning("Game %s has a malformed seat: %s", record.game_id, exc)
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            )
        except UnbalancedSettlement as exc:
            logger.error("Game %s is unbalanced: %s", record.game_id, exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(exc),
            )
        except LedgerError as exc:
            logger.error("Settle Up failure settling game %s: %s", record.game_id, exc)
            raise _bad_gateway(exc)
        except SheetsError as exc:
            logger.error("Game store failure settling game %s: %s", record.game_id, exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Game store unavailable: {exc}",
            )

        logger.info("Game %s settled as transaction %s", record.game_id, transaction_id)
        return {
            "status": SettlementStatus.SUBMITTED,
            "game_id": record.game_id,
            "transaction_id": transaction_id,
        }

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    async def list_groups(self) -> list[LedgerGroup]:
        """Groups the backend account belongs to, with their names."""
        try:
            session = await self._login()
            group_ids = await self._client.list_user_groups(
                session.member_id, session.token
            )
            details = await asyncio.gather(
                *(self._client.get_group(gid, session.token) for gid in group_ids)
            )
        except LedgerError as exc:
            raise _bad_gateway(exc)

        return [
            LedgerGroup(id=gid, name=str((info or {}).get("name", gid)))
            for gid, info in zip(group_ids, details)
        ]

    async def list_members(self) -> list[LedgerMember]:
        group_id = self._group_id()
        try:
            session = await self._login()
            return await self._client.list_members(group_id, session.token)
        except LedgerError as exc:
            raise _bad_gateway(exc)

    async def list_debts(self) -> list[Debt]:
        """Current simplified debts of the configured group, display-ready."""
        group_id = self._group_id()
        try:
            session = await self._login()
            members, raw_debts = await asyncio.gather(
                self._client.list_members(group_id, session.token),
                self._client.list_debts(group_id, session.token),
            )
        except LedgerError as exc:
            raise _bad_gateway(exc)

        names = {member.id: member.name for member in members}
        return normalize(raw_debts, names)
