"""Clients for external services."""

from mahjong_ledger.clients.settleup import (
    LedgerSession,
    SettleUpClient,
    close_settleup_client,
    get_settleup_client,
    use_settleup_client,
)

__all__ = [
    "LedgerSession",
    "SettleUpClient",
    "close_settleup_client",
    "get_settleup_client",
    "use_settleup_client",
]
