"""Settlement and debt models exchanged with the Settle Up ledger."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SeatAssignment(BaseModel):
    """One seat of a finalized game as handed to the settlement mapper.

    ``players`` may hold several names joined by ``" + "``.
    """
    players: str = ""
    score: float = 0.0


class SettlementEntry(BaseModel):
    """A balanced expense ready for submission to the ledger.

    ``participant_amounts`` keeps insertion order: members appear in seat
    order, each with its signed amount (positive = owed money).
    """
    game_id: Optional[str] = None
    payer_member_id: str
    amount: float = Field(..., gt=0)
    participant_amounts: dict[str, float]

    @property
    def creditors(self) -> dict[str, float]:
        return {m: a for m, a in self.participant_amounts.items() if a > 0}

    @property
    def debtors(self) -> dict[str, float]:
        return {m: a for m, a in self.participant_amounts.items() if a < 0}


class NoCreditorsSkipped(BaseModel):
    """Terminal no-op outcome: nobody won, so there is nothing to submit."""
    game_id: Optional[str] = None
    reason: str = "No player finished with a positive score"


class RawDebt(BaseModel):
    """A debt as returned by the ledger, before normalisation."""
    model_config = {"populate_by_name": True}

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount: Any = None
    currency_code: Optional[str] = Field(default=None, alias="currencyCode")


class Debt(BaseModel):
    """Display-ready debt with resolved member names."""
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    amount: float
    currency: str


class LedgerMember(BaseModel):
    """A member of a Settle Up group."""
    id: str
    name: str
    active: bool = True


class LedgerGroup(BaseModel):
    """A Settle Up group the backend account belongs to."""
    id: str
    name: str
