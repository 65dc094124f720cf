"""Roster model: local player names mapped to Settle Up member ids."""

from pydantic import BaseModel, Field


class RosterPlayer(BaseModel):
    """A player known to the ledger.

    ``name`` must match the display name used on score entry exactly;
    settlement lookups are case-sensitive.
    """

    name: str = Field(..., min_length=1, max_length=50)
    settleup_member_id: str = Field(..., min_length=1, max_length=128)

    def to_row(self) -> list[str]:
        return [self.name, self.settleup_member_id]
