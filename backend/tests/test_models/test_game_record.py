"""Tests for the GameRecord row contract."""

import pytest

from mahjong_ledger.errors import MalformedRow
from mahjong_ledger.models.common import Seat
from mahjong_ledger.models.game_record import (
    ROW_WIDTH,
    GameRecord,
    parse_score,
    split_player_names,
)

ROW = [
    "ABC123", "2024-03-01T20:00:00Z",
    "Alice + Bob", 30, "Carol", "-20", "Dave", -10.0, "", "",
]


class TestSplitPlayerNames:

    def test_separator_and_whitespace(self):
        assert split_player_names("Alice + Bob") == ["Alice", "Bob"]
        assert split_player_names(" Alice+Bob ") == ["Alice", "Bob"]

    def test_empty(self):
        assert split_player_names("") == []
        assert split_player_names(None) == []
        assert split_player_names(" + ") == []


class TestParseScore:

    @pytest.mark.parametrize("cell,expected", [
        (10, 10.0), ("-7.5", -7.5), ("", 0.0), (None, 0.0), ("  3 ", 3.0),
    ])
    def test_valid(self, cell, expected):
        assert parse_score(cell) == expected

    @pytest.mark.parametrize("cell", ["abc", True, "nan", "inf"])
    def test_invalid(self, cell):
        assert parse_score(cell) is None


class TestFromRow:

    def test_parses_all_seats(self):
        record = GameRecord.from_row(ROW)
        assert record.game_id == "ABC123"
        assert record.seat(Seat.EAST).player_names == ["Alice", "Bob"]
        assert record.seat(Seat.SOUTH).score == -20.0
        assert record.seat(Seat.WEST).score == -10.0
        assert not record.seat(Seat.NORTH).is_occupied
        assert record.seat_total() == 0.0

    def test_wrong_width_rejected(self):
        with pytest.raises(MalformedRow) as exc_info:
            GameRecord.from_row(ROW[:9])
        assert exc_info.value.row == ROW[:9]

    def test_too_wide_rejected(self):
        with pytest.raises(MalformedRow):
            GameRecord.from_row(ROW + ["extra"])

    def test_missing_game_id_rejected(self):
        with pytest.raises(MalformedRow):
            GameRecord.from_row([""] + ROW[1:])

    def test_bad_score_kept_as_none(self):
        row = list(ROW)
        row[5] = "oops"
        record = GameRecord.from_row(row)
        assert record.seat(Seat.SOUTH).score is None


class TestToRow:

    def test_width_and_order(self):
        row = GameRecord.from_row(ROW).to_row()
        assert len(row) == ROW_WIDTH
        assert row[:4] == ["ABC123", "2024-03-01T20:00:00Z", "Alice + Bob", 30.0]
        assert row[8:] == ["", 0.0]

    def test_iter_seats_in_table_order(self):
        record = GameRecord.from_row(ROW)
        assert [seat for seat, _ in record.iter_seats()] == [
            Seat.EAST, Seat.SOUTH, Seat.WEST, Seat.NORTH,
        ]
