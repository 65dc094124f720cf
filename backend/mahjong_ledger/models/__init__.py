"""Pydantic models for Mahjong Ledger."""

from mahjong_ledger.models.common import (
    ALL_YEARS,
    PLAYER_SEPARATOR,
    SEAT_ORDER,
    ZERO_SUM_TOLERANCE,
    RankMetric,
    Seat,
    SettlementStatus,
    SortDirection,
    StoreBackend,
)
from mahjong_ledger.models.game_record import (
    ROW_COLUMNS,
    ROW_SCHEMA_VERSION,
    ROW_WIDTH,
    GameRecord,
    SeatEntry,
)
from mahjong_ledger.models.player import RosterPlayer
from mahjong_ledger.models.settlement import (
    Debt,
    LedgerGroup,
    LedgerMember,
    NoCreditorsSkipped,
    RawDebt,
    SeatAssignment,
    SettlementEntry,
)
from mahjong_ledger.models.stats import (
    MonthlyStat,
    PairStat,
    PlayerStat,
    RunningTotalPoint,
    ScoreMark,
    Standings,
)

__all__ = [
    # Enums and constants
    "ALL_YEARS",
    "PLAYER_SEPARATOR",
    "SEAT_ORDER",
    "ZERO_SUM_TOLERANCE",
    "RankMetric",
    "Seat",
    "SettlementStatus",
    "SortDirection",
    "StoreBackend",
    # Game records
    "ROW_COLUMNS",
    "ROW_SCHEMA_VERSION",
    "ROW_WIDTH",
    "GameRecord",
    "SeatEntry",
    # Roster
    "RosterPlayer",
    # Settlement
    "Debt",
    "LedgerGroup",
    "LedgerMember",
    "NoCreditorsSkipped",
    "RawDebt",
    "SeatAssignment",
    "SettlementEntry",
    # Statistics
    "MonthlyStat",
    "PairStat",
    "PlayerStat",
    "RunningTotalPoint",
    "ScoreMark",
    "Standings",
]
