"""Common enums and shared constants for Mahjong Ledger models."""

from enum import StrEnum


class Seat(StrEnum):
    """Compass seats, in table order."""
    EAST = "East"
    SOUTH = "South"
    WEST = "West"
    NORTH = "North"


# Seat order used by the row contract and by the settlement mapper.
SEAT_ORDER: tuple[Seat, ...] = (Seat.EAST, Seat.SOUTH, Seat.WEST, Seat.NORTH)

# Sentinel year filter meaning "do not restrict by year".
ALL_YEARS = "all"

# Separator written between names that share one seat.
PLAYER_SEPARATOR = " + "

# Maximum absolute seat-score sum still considered zero.
ZERO_SUM_TOLERANCE = 0.01


class RankMetric(StrEnum):
    """PlayerStat fields that standings can be ranked by."""
    GAMES = "games"
    WINS = "wins"
    LOSSES = "losses"
    WIN_RATE = "win_rate"
    AVERAGE = "average"
    TOTAL = "total"
    HIGHEST = "highest"
    LOWEST = "lowest"
    VARIANCE = "variance"


class SortDirection(StrEnum):
    """Ranking direction: DESC for most/best/highest, ASC for least/worst/lowest."""
    DESC = "desc"
    ASC = "asc"


class StoreBackend(StrEnum):
    """Supported GameRecord store adapters."""
    SHEETS = "sheets"
    MONGO = "mongo"


class SettlementStatus(StrEnum):
    """Terminal outcomes of pushing a game to the ledger."""
    SUBMITTED = "SUBMITTED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"
