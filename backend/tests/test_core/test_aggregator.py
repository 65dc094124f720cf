"""Tests for score aggregation, rankings and the time-series helpers."""

import random
from datetime import date

import pytest

from mahjong_ledger.models.common import ALL_YEARS, RankMetric, SortDirection
from mahjong_ledger.services import aggregator


@pytest.fixture
def two_game_history(record_factory):
    return [
        record_factory("G1", [("A", 10.0), ("B", -10.0)], "2024-01-10T19:00:00Z"),
        record_factory("G2", [("A", -5.0), ("B", 5.0)], "2024-02-10T19:00:00Z"),
    ]


@pytest.fixture
def shared_seat_history(record_factory):
    return [
        record_factory(
            "G1",
            [("A + B", 30.0), ("C", -20.0), ("D", -10.0)],
            "2023-12-31T22:00:00Z",
        ),
        record_factory(
            "G2",
            [("A", -10.0), ("C", 10.0)],
            "2024-01-05T20:00:00Z",
        ),
    ]


# ---------------------------------------------------------------------------
# compute_standings
# ---------------------------------------------------------------------------

class TestComputeStandings:

    def test_two_game_player_summary(self, two_game_history):
        a = aggregator.compute_standings(two_game_history).players["A"]
        assert a.games == 2
        assert a.wins == 1
        assert a.losses == 1
        assert a.average == pytest.approx(2.5)
        assert a.highest.score == 10.0
        assert a.lowest.score == -5.0

    def test_highest_keeps_its_timestamp(self, two_game_history):
        a = aggregator.compute_standings(two_game_history).players["A"]
        assert a.highest.timestamp == "2024-01-10T19:00:00Z"
        assert a.lowest.timestamp == "2024-02-10T19:00:00Z"

    def test_idempotent(self, shared_seat_history):
        first = aggregator.compute_standings(shared_seat_history, "2024")
        second = aggregator.compute_standings(shared_seat_history, "2024")
        assert first == second

    def test_input_not_mutated(self, shared_seat_history):
        before = [r.model_copy(deep=True) for r in shared_seat_history]
        aggregator.compute_standings(shared_seat_history)
        assert shared_seat_history == before

    def test_shared_seat_counts_raw_but_averages_split(self, shared_seat_history):
        players = aggregator.compute_standings(shared_seat_history).players
        a = players["A"]
        b = players["B"]
        # raw seat score for counting statistics
        assert a.highest.score == 30.0
        assert b.highest.score == 30.0
        assert b.wins == 1
        # split score for totals
        assert b.total == pytest.approx(15.0)
        assert a.total == pytest.approx(15.0 - 10.0)
        assert a.average == pytest.approx(2.5)

    def test_variance_uses_raw_scores(self, shared_seat_history):
        a = aggregator.compute_standings(shared_seat_history).players["A"]
        assert a.scores == [30.0, -10.0]
        assert a.variance == pytest.approx(400.0)

    def test_players_are_global_and_pairs_are_year_scoped(self, shared_seat_history):
        standings = aggregator.compute_standings(shared_seat_history, "2024")
        assert set(standings.players) == {"A", "B", "C", "D"}
        # the only shared seat was in 2023
        assert standings.partners == {}
        assert set(standings.monthly["A"]) == {"2024-01"}
        assert "D" not in standings.monthly

    def test_partner_and_co_player_stats(self, shared_seat_history):
        standings = aggregator.compute_standings(shared_seat_history, ALL_YEARS)
        partner = standings.partners["A"]["B"]
        assert partner.games == 1
        assert partner.total == pytest.approx(15.0)
        co = standings.co_players["C"]
        assert co["A"].games == 2
        assert co["A"].total == pytest.approx(-10.0)

    def test_monthly_uses_split_score(self, shared_seat_history):
        standings = aggregator.compute_standings(shared_seat_history)
        december = standings.monthly["B"]["2023-12"]
        assert december.games == 1
        assert december.total == pytest.approx(15.0)

    def test_unparsable_score_skips_only_that_seat(self, record_factory):
        records = [record_factory("G1", [("A", 10.0), ("B", None), ("C", -10.0)])]
        players = aggregator.compute_standings(records).players
        assert "B" not in players
        assert players["A"].games == 1
        assert players["C"].games == 1

    def test_unparsable_timestamp_excluded_from_dated_views(self, record_factory):
        records = [record_factory("G1", [("A", 10.0), ("B", -10.0)], "not a date")]
        standings = aggregator.compute_standings(records)
        assert standings.players["A"].games == 1
        assert standings.monthly == {}

    def test_fuzz_unbalanced_records_degrade_gracefully(self, record_factory):
        rng = random.Random(1234)
        names = ["A", "B", "C", "D", "E", "F"]
        records = []
        for index in range(200):
            seats = []
            for _ in range(4):
                players = " + ".join(rng.sample(names, rng.randint(0, 2)))
                score = rng.choice([None, rng.uniform(-100, 100), 0.0])
                seats.append((players, score))
            timestamp = rng.choice(["2024-05-01T10:00:00Z", "", "garbage", "2023-07-08"])
            records.append(record_factory(f"G{index}", seats, timestamp))

        standings = aggregator.compute_standings(records, "2024")
        for stat in standings.players.values():
            assert stat.games == len(stat.scores)
            assert stat.wins + stat.losses <= stat.games

    def test_empty_input(self):
        standings = aggregator.compute_standings([])
        assert standings.players == {}


# ---------------------------------------------------------------------------
# Rankings and leaders
# ---------------------------------------------------------------------------

class TestRankings:

    def test_rank_by_total_desc(self, two_game_history, record_factory):
        records = two_game_history + [
            record_factory("G3", [("C", 20.0), ("A", -20.0)], "2024-03-01T19:00:00Z")
        ]
        players = aggregator.compute_standings(records).players
        ranked = [name for name, _ in aggregator.rank_by(players, RankMetric.TOTAL)]
        assert ranked == ["C", "B", "A"]

    def test_ties_keep_insertion_order_both_directions(self, two_game_history):
        players = aggregator.compute_standings(two_game_history).players
        desc = aggregator.rank_by(players, "games", "desc")
        asc = aggregator.rank_by(players, "games", "asc")
        assert [name for name, _ in desc] == ["A", "B"]
        assert [name for name, _ in asc] == ["A", "B"]

    def test_rank_by_win_rate(self, record_factory):
        records = [
            record_factory("G1", [("A", -1.0), ("B", 1.0)]),
            record_factory("G2", [("A", 2.0), ("B", -2.0)]),
            record_factory("G3", [("B", 3.0), ("C", -3.0)]),
        ]
        players = aggregator.compute_standings(records).players
        ranked = aggregator.rank_by(players, RankMetric.WIN_RATE, SortDirection.DESC)
        assert ranked[0][0] == "B"
        assert ranked[-1][0] == "C"

    def test_unknown_metric_rejected(self, two_game_history):
        players = aggregator.compute_standings(two_game_history).players
        with pytest.raises(ValueError):
            aggregator.rank_by(players, "charisma")

    def test_leaders(self, shared_seat_history):
        players = aggregator.compute_standings(shared_seat_history).players
        assert aggregator.most_played(players)[0] == "A"
        assert aggregator.least_played(players)[0] == "B"
        assert aggregator.biggest_win(players)[0] == "A"
        assert aggregator.biggest_loss(players)[0] == "C"
        assert aggregator.most_volatile(players)[0] == "A"

    @pytest.mark.parametrize("selection", list(aggregator.LEADER_SELECTIONS))
    def test_leaders_on_empty_standings_are_none(self, selection):
        assert aggregator.LEADER_SELECTIONS[selection]({}) is None

    def test_best_and_worst_partner(self, record_factory):
        records = [
            record_factory("G1", [("A + B", 20.0), ("C", -20.0)]),
            record_factory("G2", [("A + C", -20.0), ("B", 20.0)]),
        ]
        standings = aggregator.compute_standings(records)
        assert aggregator.best_partner(standings, "A").other == "B"
        assert aggregator.worst_partner(standings, "A").other == "C"
        assert aggregator.best_partner(standings, "nobody") is None


# ---------------------------------------------------------------------------
# Time series and helpers
# ---------------------------------------------------------------------------

class TestTimeSeries:

    def test_running_totals_carry_forward(self, shared_seat_history, record_factory):
        records = shared_seat_history + [
            record_factory("G3", [("B", 4.0), ("C", -4.0)], "2024-01-06T20:00:00Z")
        ]
        points = aggregator.running_totals(records)
        assert [p.game_id for p in points] == ["G1", "G2", "G3"]
        assert points[0].totals == {"A": 15.0, "B": 15.0, "C": -20.0, "D": -10.0}
        assert points[1].totals["A"] == pytest.approx(5.0)
        assert points[2].totals["A"] == pytest.approx(5.0)
        assert points[2].totals["B"] == pytest.approx(19.0)

    def test_filter_by_date_range_inclusive(self, shared_seat_history):
        kept = aggregator.filter_by_date_range(
            shared_seat_history, date(2024, 1, 5), date(2024, 1, 5)
        )
        assert [r.game_id for r in kept] == ["G2"]

    def test_filter_without_bounds_keeps_everything(self, record_factory):
        records = [record_factory("G1", [("A", 1.0), ("B", -1.0)], "bad")]
        assert aggregator.filter_by_date_range(records) == records

    def test_filter_drops_unparsable_when_bounded(self, record_factory):
        records = [record_factory("G1", [("A", 1.0), ("B", -1.0)], "bad")]
        assert aggregator.filter_by_date_range(records, start=date(2020, 1, 1)) == []

    def test_known_players_first_appearance_order(self, shared_seat_history):
        assert aggregator.known_players(shared_seat_history) == ["A", "B", "C", "D"]

    def test_available_years_newest_first(self, shared_seat_history, record_factory):
        records = shared_seat_history + [record_factory("G9", [], "junk")]
        assert aggregator.available_years(records) == ["2024", "2023"]
