"""Settle Up route handlers.

Endpoints:
    GET /api/ledger/groups   -- Groups the backend account belongs to.
    GET /api/ledger/members  -- Members of the configured group (admin).
    GET /api/ledger/debts    -- Current debts, names resolved.
"""

import logging

from fastapi import APIRouter, Depends

from mahjong_ledger.auth.context import AuthContext
from mahjong_ledger.auth.dependencies import get_auth_context
from mahjong_ledger.clients.settleup import get_settleup_client
from mahjong_ledger.dal.store import get_store
from mahjong_ledger.models.settlement import Debt, LedgerGroup, LedgerMember
from mahjong_ledger.services.ledger_service import LedgerService

logger = logging.getLogger("mahjong_ledger.routes.ledger")

router = APIRouter(prefix="/ledger", tags=["Ledger"])


def _get_service() -> LedgerService:
    return LedgerService(get_settleup_client(), get_store())


@router.get("/groups", response_model=list[LedgerGroup])
async def list_groups() -> list[LedgerGroup]:
    return await _get_service().list_groups()


@router.get("/members", response_model=list[LedgerMember])
async def list_members(
    auth: AuthContext = Depends(get_auth_context),
) -> list[LedgerMember]:
    return await _get_service().list_members()


@router.get("/debts", response_model=list[Debt])
async def list_debts() -> list[Debt]:
    """Who owes whom in the configured group, rounded to cents."""
    return await _get_service().list_debts()
