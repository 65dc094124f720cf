"""Score aggregation: replay GameRecords into player statistics.

Everything here is pure and synchronous. Callers pass data rows only
(store adapters already drop the sheet header) in sheet order, oldest
first.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from mahjong_ledger.models.common import ALL_YEARS, RankMetric, SortDirection
from mahjong_ledger.models.game_record import GameRecord
from mahjong_ledger.models.stats import (
    MonthlyStat,
    PairStat,
    PlayerStat,
    RunningTotalPoint,
    ScoreMark,
    Standings,
)
from mahjong_ledger.services.score_math import (
    per_capita_split,
    population_variance,
    raw_seat_attribution,
)

logger = logging.getLogger("mahjong_ledger.services.aggregator")

Leader = Optional[tuple[str, PlayerStat]]


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

def parse_timestamp(timestamp: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed); None if invalid."""
    if not timestamp:
        return None
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None


def _in_year(timestamp: str, year_filter: str) -> bool:
    return year_filter == ALL_YEARS or timestamp[:4] == year_filter


# ---------------------------------------------------------------------------
# Standings
# ---------------------------------------------------------------------------

def _accumulate_pair(
    table: dict[str, dict[str, PairStat]],
    player: str,
    other: str,
    share: float,
) -> None:
    pairs = table.setdefault(player, {})
    stat = pairs.get(other)
    if stat is None:
        stat = pairs[other] = PairStat(player=player, other=other)
    stat.total += share
    stat.games += 1


def compute_standings(
    records: Iterable[GameRecord],
    year_filter: str = ALL_YEARS,
) -> Standings:
    """Replay every record into per-player statistics.

    ``players`` covers all records regardless of ``year_filter``;
    ``partners``, ``co_players`` and ``monthly`` only fold in records whose
    timestamp year matches. Seats without names or with an unparsable
    score are skipped on their own; a record with an unparsable timestamp
    still counts toward ``players`` but not toward year-scoped views.

    Args:
        records: Data rows in store order.
        year_filter: ``ALL_YEARS`` or a 4-digit year string.

    Returns:
        A fresh Standings instance; the input is never mutated.
    """
    standings = Standings(year=year_filter)
    players = standings.players

    for record in records:
        parsed_at = parse_timestamp(record.timestamp)
        in_scope = parsed_at is not None and _in_year(record.timestamp, year_filter)
        if parsed_at is None:
            logger.debug(
                "Game %s has unparsable timestamp %r; excluded from dated views",
                record.game_id, record.timestamp,
            )

        # name -> split share, across every valid seat of this game
        game_shares: dict[str, float] = {}

        for seat, entry in record.iter_seats():
            if not entry.player_names:
                continue
            if entry.score is None:
                logger.debug(
                    "Skipping seat %s of game %s: unparsable score",
                    seat, record.game_id,
                )
                continue

            for name, raw in raw_seat_attribution(entry.player_names, entry.score):
                stat = players.get(name)
                if stat is None:
                    stat = players[name] = PlayerStat(name=name)
                stat.games += 1
                if raw > 0:
                    stat.wins += 1
                elif raw < 0:
                    stat.losses += 1
                stat.scores.append(raw)
                if stat.highest is None or raw > stat.highest.score:
                    stat.highest = ScoreMark(score=raw, timestamp=record.timestamp)
                if stat.lowest is None or raw < stat.lowest.score:
                    stat.lowest = ScoreMark(score=raw, timestamp=record.timestamp)

            split = per_capita_split(entry.player_names, entry.score)
            for name, share in split:
                players[name].total += share
                game_shares[name] = game_shares.get(name, 0.0) + share

            if in_scope:
                for name, share in split:
                    for partner in entry.player_names:
                        if partner != name:
                            _accumulate_pair(standings.partners, name, partner, share)

        if not in_scope:
            continue

        month = parsed_at.strftime("%Y-%m")
        for name, share in game_shares.items():
            monthly = standings.monthly.setdefault(name, {})
            bucket = monthly.get(month)
            if bucket is None:
                bucket = monthly[month] = MonthlyStat(month=month)
            bucket.games += 1
            bucket.total += share
            for other in game_shares:
                if other != name:
                    _accumulate_pair(standings.co_players, name, other, share)

    for stat in players.values():
        stat.variance = population_variance(stat.scores)

    return standings


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def _metric_value(stat: PlayerStat, metric: RankMetric) -> float:
    if metric == RankMetric.HIGHEST:
        return stat.highest.score if stat.highest else float("-inf")
    if metric == RankMetric.LOWEST:
        return stat.lowest.score if stat.lowest else float("inf")
    return getattr(stat, metric.value)


def rank_by(
    players: dict[str, PlayerStat],
    metric: RankMetric | str,
    direction: SortDirection | str = SortDirection.DESC,
) -> list[tuple[str, PlayerStat]]:
    """Stable sort of the standings by one metric.

    Ties keep insertion order in both directions.
    """
    metric = RankMetric(metric)
    direction = SortDirection(direction)
    return sorted(
        players.items(),
        key=lambda item: _metric_value(item[1], metric),
        reverse=direction == SortDirection.DESC,
    )


def _first(ranked: list[tuple[str, PlayerStat]]) -> Leader:
    return ranked[0] if ranked else None


def most_played(players: dict[str, PlayerStat]) -> Leader:
    return _first(rank_by(players, RankMetric.GAMES, SortDirection.DESC))


def least_played(players: dict[str, PlayerStat]) -> Leader:
    return _first(rank_by(players, RankMetric.GAMES, SortDirection.ASC))


def biggest_win(players: dict[str, PlayerStat]) -> Leader:
    return _first(rank_by(players, RankMetric.HIGHEST, SortDirection.DESC))


def biggest_loss(players: dict[str, PlayerStat]) -> Leader:
    return _first(rank_by(players, RankMetric.LOWEST, SortDirection.ASC))


def most_volatile(players: dict[str, PlayerStat]) -> Leader:
    return _first(rank_by(players, RankMetric.VARIANCE, SortDirection.DESC))


LEADER_SELECTIONS = {
    "most_played": most_played,
    "least_played": least_played,
    "biggest_win": biggest_win,
    "biggest_loss": biggest_loss,
    "most_volatile": most_volatile,
}


def _partner_extreme(
    standings: Standings, player: str, direction: SortDirection
) -> Optional[PairStat]:
    pairs = list(standings.partners.get(player, {}).values())
    if not pairs:
        return None
    pairs.sort(key=lambda p: p.average, reverse=direction == SortDirection.DESC)
    return pairs[0]


def best_partner(standings: Standings, player: str) -> Optional[PairStat]:
    """Seat partner with the highest average split score for ``player``."""
    return _partner_extreme(standings, player, SortDirection.DESC)


def worst_partner(standings: Standings, player: str) -> Optional[PairStat]:
    """Seat partner with the lowest average split score for ``player``."""
    return _partner_extreme(standings, player, SortDirection.ASC)


# ---------------------------------------------------------------------------
# Time series and helpers
# ---------------------------------------------------------------------------

def running_totals(records: Iterable[GameRecord]) -> list[RunningTotalPoint]:
    """Cumulative split score per player after each game.

    Players appear in a point only once they have played; their total
    carries forward through games they sit out.
    """
    totals: dict[str, float] = {}
    points: list[RunningTotalPoint] = []
    for record in records:
        for _, entry in record.iter_seats():
            if not entry.player_names or entry.score is None:
                continue
            for name, share in per_capita_split(entry.player_names, entry.score):
                totals[name] = totals.get(name, 0.0) + share
        points.append(
            RunningTotalPoint(
                game_id=record.game_id,
                timestamp=record.timestamp,
                totals=dict(totals),
            )
        )
    return points


def filter_by_date_range(
    records: Iterable[GameRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[GameRecord]:
    """Keep records whose date falls within ``[start, end]`` (inclusive).

    Records with unparsable timestamps are kept only when no bound is set.
    """
    if start is None and end is None:
        return list(records)
    kept: list[GameRecord] = []
    for record in records:
        parsed_at = parse_timestamp(record.timestamp)
        if parsed_at is None:
            continue
        day = parsed_at.date()
        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        kept.append(record)
    return kept


def known_players(records: Iterable[GameRecord]) -> list[str]:
    """Every distinct player name, in order of first appearance."""
    seen: dict[str, None] = {}
    for record in records:
        for _, entry in record.iter_seats():
            for name in entry.player_names:
                seen.setdefault(name, None)
    return list(seen)


def available_years(records: Iterable[GameRecord]) -> list[str]:
    """Distinct 4-digit years present in valid timestamps, newest first."""
    years = {
        record.timestamp[:4]
        for record in records
        if parse_timestamp(record.timestamp) is not None
    }
    return sorted(years, reverse=True)
