"""Turn raw ledger debts into display-ready rows."""

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from mahjong_ledger.models.settlement import Debt, RawDebt
from mahjong_ledger.services.score_math import parse_amount, round_currency

logger = logging.getLogger("mahjong_ledger.services.debt_normalizer")

DEFAULT_CURRENCY = "N/A"


def unknown_member(member_id: str) -> str:
    return f"Unknown ({member_id})"


def normalize(
    raw_debts: Iterable[RawDebt | dict[str, Any]],
    member_names: dict[str, str],
) -> list[Debt]:
    """Resolve names, round amounts to cents and default the currency.

    Entries missing a debtor or creditor id, or whose amount is not a
    finite number, are dropped with a warning.
    Output order follows input order.
    """
    debts: list[Debt] = []
    for raw in raw_debts:
        if not isinstance(raw, RawDebt):
            try:
                raw = RawDebt.model_validate(raw)
            except ValidationError:
                logger.warning("Dropping incomplete debt entry %r", raw)
                continue
        amount = parse_amount(raw.amount)
        if amount is None:
            logger.warning(
                "Dropping debt %s -> %s with invalid amount %r",
                raw.from_id, raw.to_id, raw.amount,
            )
            continue
        debts.append(
            Debt(
                from_id=raw.from_id,
                from_name=member_names.get(raw.from_id) or unknown_member(raw.from_id),
                to_id=raw.to_id,
                to_name=member_names.get(raw.to_id) or unknown_member(raw.to_id),
                amount=round_currency(amount),
                currency=raw.currency_code or DEFAULT_CURRENCY,
            )
        )
    return debts
