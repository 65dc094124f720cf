"""Derived statistics models. Nothing here is persisted."""

from typing import Optional

from pydantic import BaseModel, Field

from mahjong_ledger.models.common import ALL_YEARS


class ScoreMark(BaseModel):
    """A single-game score and when it happened."""
    score: float
    timestamp: str


class PlayerStat(BaseModel):
    """Per-player summary, rebuilt from every GameRecord on each query.

    ``games``, ``wins``, ``losses``, ``highest``, ``lowest`` and
    ``variance`` use the raw (unsplit) seat score. ``total`` and
    ``average`` use the per-capita split score.
    """

    name: str
    games: int = 0
    wins: int = 0
    losses: int = 0
    total: float = 0.0
    scores: list[float] = Field(default_factory=list)
    highest: Optional[ScoreMark] = None
    lowest: Optional[ScoreMark] = None
    variance: float = 0.0

    @property
    def win_rate(self) -> float:
        return self.wins / self.games if self.games else 0.0

    @property
    def average(self) -> float:
        return self.total / self.games if self.games else 0.0

    def summary(self) -> dict:
        """Flat, display-ready view including the derived fields."""
        data = self.model_dump(exclude={"scores"})
        data["win_rate"] = round(self.win_rate, 4)
        data["average"] = round(self.average, 2)
        data["variance"] = round(self.variance, 4)
        data["total"] = round(self.total, 2)
        return data


class PairStat(BaseModel):
    """Accumulated split score of ``player`` in games shared with ``other``."""

    player: str
    other: str
    total: float = 0.0
    games: int = 0

    @property
    def average(self) -> float:
        return self.total / self.games if self.games else 0.0


class MonthlyStat(BaseModel):
    """A player's split-score results within one ``YYYY-MM`` month."""

    month: str
    games: int = 0
    total: float = 0.0

    @property
    def average(self) -> float:
        return self.total / self.games if self.games else 0.0


class Standings(BaseModel):
    """Output of ``compute_standings``.

    ``players`` always covers every record. ``partners``, ``co_players``
    and ``monthly`` only cover records inside ``year``.
    """

    year: str = ALL_YEARS
    players: dict[str, PlayerStat] = Field(default_factory=dict)
    partners: dict[str, dict[str, PairStat]] = Field(default_factory=dict)
    co_players: dict[str, dict[str, PairStat]] = Field(default_factory=dict)
    monthly: dict[str, dict[str, MonthlyStat]] = Field(default_factory=dict)


class RunningTotalPoint(BaseModel):
    """Cumulative split score of every player after one game."""

    game_id: str
    timestamp: str
    totals: dict[str, float] = Field(default_factory=dict)
