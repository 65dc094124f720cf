"""Map a finalized game's seat scores onto a Settle Up expense.

Pure functions: no I/O. Submitting the result is the ledger service's job.
"""

import logging
from typing import Any, Iterable, Optional

from mahjong_ledger.errors import MalformedRow, PlayerNotMapped, UnbalancedSettlement
from mahjong_ledger.models.common import ZERO_SUM_TOLERANCE
from mahjong_ledger.models.game_record import GameRecord, split_player_names
from mahjong_ledger.models.player import RosterPlayer
from mahjong_ledger.models.settlement import (
    LedgerMember,
    NoCreditorsSkipped,
    SeatAssignment,
    SettlementEntry,
)
from mahjong_ledger.services.score_math import SharePolicy, raw_seat_attribution

logger = logging.getLogger("mahjong_ledger.services.settlement_mapper")

TRANSACTION_CATEGORY = "🏆"
TRANSACTION_TYPE = "expense"


def seat_assignments(record: GameRecord) -> list[SeatAssignment]:
    """Flatten a stored record into seat-ordered assignments.

    Raises:
        MalformedRow: An occupied seat has no readable score.
    """
    assignments: list[SeatAssignment] = []
    for seat, entry in record.iter_seats():
        if entry.score is None:
            if entry.is_occupied:
                raise MalformedRow(
                    f"Game {record.game_id}: {seat} has no valid score"
                )
            continue
        assignments.append(
            SeatAssignment(players=entry.players_cell, score=entry.score)
        )
    return assignments


def build_expense(
    assignments: Iterable[SeatAssignment],
    member_directory: dict[str, str],
    game_id: Optional[str] = None,
    share_policy: SharePolicy = raw_seat_attribution,
) -> SettlementEntry | NoCreditorsSkipped:
    """Build the ledger expense for one finalized game.

    Every member of a shared seat receives the full seat score under the
    default ``raw_seat_attribution`` policy. The zero-sum check runs over
    seat scores, counting each occupied seat once.

    Args:
        assignments: Seats in table order.
        member_directory: Exact display name -> ledger member id.
        game_id: Carried through onto the result.
        share_policy: How a seat score is shared among its players.

    Returns:
        A SettlementEntry, or NoCreditorsSkipped when nobody won.

    Raises:
        PlayerNotMapped: Any name is missing from the directory; lists all.
        UnbalancedSettlement: Seat scores do not sum to zero.
    """
    seats: list[tuple[list[str], float]] = []
    unmapped: list[str] = []
    for assignment in assignments:
        names = split_player_names(assignment.players)
        if not names:
            continue
        seats.append((names, assignment.score))
        for name in names:
            if name not in member_directory and name not in unmapped:
                unmapped.append(name)

    if unmapped:
        raise PlayerNotMapped(unmapped)

    creditor_total = sum(score for _, score in seats if score > 0)
    debtor_total = sum(score for _, score in seats if score < 0)
    imbalance = creditor_total + debtor_total
    if abs(imbalance) > ZERO_SUM_TOLERANCE:
        raise UnbalancedSettlement(imbalance)

    participants: dict[str, float] = {}
    for names, score in seats:
        for name, amount in share_policy(names, score):
            if amount == 0:
                continue
            member_id = member_directory[name]
            participants[member_id] = participants.get(member_id, 0.0) + amount
    participants = {m: a for m, a in participants.items() if a != 0}

    creditors = [member for member, amount in participants.items() if amount > 0]
    if not creditors:
        logger.info("Game %s has no creditors; settlement skipped", game_id)
        return NoCreditorsSkipped(game_id=game_id)

    return SettlementEntry(
        game_id=game_id,
        payer_member_id=creditors[0],
        amount=round(creditor_total, 2),
        participant_amounts=participants,
    )


# ---------------------------------------------------------------------------
# Member directories
# ---------------------------------------------------------------------------

def directory_from_roster(players: Iterable[RosterPlayer]) -> dict[str, str]:
    """Name -> member id from the local roster; later duplicates are ignored."""
    directory: dict[str, str] = {}
    for player in players:
        name = player.name.strip()
        member_id = player.settleup_member_id.strip()
        if not name or not member_id:
            logger.warning("Roster entry %r is incomplete; ignored", player.name)
            continue
        directory.setdefault(name, member_id)
    return directory


def directory_from_members(members: Iterable[LedgerMember]) -> dict[str, str]:
    """Name -> member id from the ledger's own member list."""
    directory: dict[str, str] = {}
    for member in members:
        directory.setdefault(member.name, member.id)
    return directory


# ---------------------------------------------------------------------------
# Wire payload
# ---------------------------------------------------------------------------

def _weight(amount: float) -> str:
    return f"{abs(amount):.2f}"


def to_settleup_transaction(
    entry: SettlementEntry,
    currency_code: str,
    timestamp_ms: int,
) -> dict[str, Any]:
    """Render a SettlementEntry as a Settle Up ``transactions`` payload.

    The designated payer is listed first in ``whoPaid``; every creditor is
    weighted by what it is owed and every debtor by what it owes.
    """
    creditors = entry.creditors
    who_paid = [{"memberId": entry.payer_member_id,
                 "weight": _weight(creditors[entry.payer_member_id])}]
    who_paid.extend(
        {"memberId": member_id, "weight": _weight(amount)}
        for member_id, amount in creditors.items()
        if member_id != entry.payer_member_id
    )
    for_whom = [
        {"memberId": member_id, "weight": _weight(amount)}
        for member_id, amount in entry.debtors.items()
    ]
    return {
        "category": TRANSACTION_CATEGORY,
        "currencyCode": currency_code,
        "dateTime": timestamp_ms,
        "purpose": f"Mahjong Game Settlement (Game {entry.game_id or 'N/A'})",
        "type": TRANSACTION_TYPE,
        "whoPaid": who_paid,
        "items": [
            {
                "amount": f"{entry.amount:.2f}",
                "forWhom": for_whom,
            }
        ],
    }
