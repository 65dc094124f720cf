"""Tests for debt normalisation."""

import logging

from mahjong_ledger.models.settlement import RawDebt
from mahjong_ledger.services.debt_normalizer import normalize


class TestNormalize:

    def test_incomplete_directory_and_half_cent(self):
        debts = normalize(
            [{"from": "x", "to": "y", "amount": "12.005", "currencyCode": None}],
            {"x": "Alice"},
        )
        assert len(debts) == 1
        debt = debts[0]
        assert debt.from_name == "Alice"
        assert debt.to_name == "Unknown (y)"
        assert debt.amount == 12.01
        assert debt.currency == "N/A"

    def test_currency_kept_when_present(self):
        debts = normalize(
            [RawDebt(from_id="x", to_id="y", amount=5, currency_code="CAD")],
            {"x": "Alice", "y": "Bob"},
        )
        assert debts[0].currency == "CAD"
        assert debts[0].amount == 5.0

    def test_invalid_amount_dropped_with_warning(self, caplog):
        raw = [
            {"from": "x", "to": "y", "amount": "abc"},
            {"from": "y", "to": "x", "amount": "3.5"},
        ]
        with caplog.at_level(logging.WARNING, logger="mahjong_ledger"):
            debts = normalize(raw, {})
        assert [d.amount for d in debts] == [3.5]
        assert "invalid amount" in caplog.text

    def test_incomplete_entry_dropped_with_warning(self, caplog):
        raw = [
            {"to": "y", "amount": "2.00"},
            {"from": "x", "amount": "2.00"},
            {"from": "x", "to": "y", "amount": "1.25"},
        ]
        with caplog.at_level(logging.WARNING, logger="mahjong_ledger"):
            debts = normalize(raw, {"x": "Alice", "y": "Bob"})
        assert [(d.from_name, d.amount) for d in debts] == [("Alice", 1.25)]
        assert caplog.text.count("incomplete debt entry") == 2

    def test_order_preserved(self):
        raw = [
            {"from": "a", "to": "b", "amount": 1},
            {"from": "c", "to": "d", "amount": 2},
            {"from": "e", "to": "f", "amount": 3},
        ]
        assert [d.from_id for d in normalize(raw, {})] == ["a", "c", "e"]

    def test_empty(self):
        assert normalize([], {}) == []
