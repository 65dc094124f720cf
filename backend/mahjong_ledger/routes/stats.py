"""Statistics route handlers. All endpoints are public and read-only.

Endpoints:
    GET /api/stats/standings        -- Per-player statistics (+ year-scoped pairs).
    GET /api/stats/leaders          -- Headline leaders.
    GET /api/stats/rankings         -- Players ranked by one metric.
    GET /api/stats/players/{name}   -- One player's full breakdown.
    GET /api/stats/running-totals   -- Cumulative score series for charting.
    GET /api/stats/years            -- Years with recorded games.
    GET /api/stats/suggestions      -- Player names for score entry.
"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Path, Query, status

from mahjong_ledger.dal.store import get_store
from mahjong_ledger.models.common import ALL_YEARS, RankMetric, SortDirection
from mahjong_ledger.models.stats import PairStat, Standings
from mahjong_ledger.services import aggregator

logger = logging.getLogger("mahjong_ledger.routes.stats")

router = APIRouter(prefix="/stats", tags=["Stats"])

_YEAR_PATTERN = r"^(all|\d{4})$"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _standings(year: str) -> Standings:
    records = await get_store().list_records()
    return aggregator.compute_standings(records, year)


def _pair(pair: PairStat) -> dict[str, Any]:
    return {
        "player": pair.player,
        "other": pair.other,
        "games": pair.games,
        "total": round(pair.total, 2),
        "average": round(pair.average, 2),
    }


def _pairs(table: dict[str, PairStat]) -> list[dict[str, Any]]:
    return [_pair(pair) for pair in table.values()]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/standings")
async def get_standings(
    year: str = Query(ALL_YEARS, pattern=_YEAR_PATTERN),
) -> dict[str, Any]:
    """Per-player summaries for all games plus pair and monthly tables for ``year``."""
    standings = await _standings(year)
    return {
        "year": standings.year,
        "players": [stat.summary() for stat in standings.players.values()],
        "partners": {name: _pairs(t) for name, t in standings.partners.items()},
        "co_players": {name: _pairs(t) for name, t in standings.co_players.items()},
        "monthly": {
            name: [
                {
                    "month": m.month,
                    "games": m.games,
                    "total": round(m.total, 2),
                    "average": round(m.average, 2),
                }
                for m in months.values()
            ]
            for name, months in standings.monthly.items()
        },
    }


@router.get("/leaders")
async def get_leaders(
    year: str = Query(ALL_YEARS, pattern=_YEAR_PATTERN),
) -> dict[str, Optional[dict[str, Any]]]:
    """Headline leaders; each is null when there are no games."""
    players = (await _standings(year)).players
    leaders: dict[str, Optional[dict[str, Any]]] = {}
    for key, select in aggregator.LEADER_SELECTIONS.items():
        leader = select(players)
        leaders[key] = leader[1].summary() if leader else None
    return leaders


@router.get("/rankings")
async def get_rankings(
    metric: RankMetric = Query(RankMetric.TOTAL),
    direction: SortDirection = Query(SortDirection.DESC),
) -> list[dict[str, Any]]:
    players = (await _standings(ALL_YEARS)).players
    ranked = aggregator.rank_by(players, metric, direction)
    return [
        {"rank": index, **stat.summary()}
        for index, (_, stat) in enumerate(ranked, start=1)
    ]


@router.get("/players/{name}")
async def get_player(
    name: str = Path(...),
    year: str = Query(ALL_YEARS, pattern=_YEAR_PATTERN),
) -> dict[str, Any]:
    """Everything known about one player.

    Raises:
        HTTPException 404: The player has never played.
    """
    standings = await _standings(year)
    stat = standings.players.get(name)
    if stat is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No games recorded for {name}",
        )
    best = aggregator.best_partner(standings, name)
    worst = aggregator.worst_partner(standings, name)
    return {
        **stat.summary(),
        "scores": stat.scores,
        "best_partner": _pair(best) if best else None,
        "worst_partner": _pair(worst) if worst else None,
        "partners": _pairs(standings.partners.get(name, {})),
        "co_players": _pairs(standings.co_players.get(name, {})),
        "monthly": [
            {"month": m.month, "games": m.games, "total": round(m.total, 2)}
            for m in standings.monthly.get(name, {}).values()
        ],
    }


@router.get("/running-totals")
async def get_running_totals(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
) -> list[dict[str, Any]]:
    records = await get_store().list_records()
    records = aggregator.filter_by_date_range(records, start, end)
    return [point.model_dump() for point in aggregator.running_totals(records)]


@router.get("/years")
async def get_years() -> list[str]:
    records = await get_store().list_records()
    return aggregator.available_years(records)


@router.get("/suggestions")
async def get_suggestions(
    q: str = Query("", max_length=50, description="Case-insensitive name prefix."),
) -> list[str]:
    """Names for the score entry form: past players first, then roster-only names."""
    store = get_store()
    names = aggregator.known_players(await store.list_records())
    for player in await store.list_players():
        if player.name not in names:
            names.append(player.name)
    prefix = q.strip().lower()
    if prefix:
        names = [name for name in names if name.lower().startswith(prefix)]
    return names
