"""Domain exceptions for Mahjong Ledger.

The pure scoring/settlement core raises these; the service and route layers
translate them into ``HTTPException`` responses.
"""


class MalformedRow(ValueError):
    """A stored row does not match the row contract."""

    def __init__(self, message: str, row: list | None = None) -> None:
        super().__init__(message)
        self.row = row


class RecordNotFound(LookupError):
    """No stored row carries the requested game id."""

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game {game_id} not found")
        self.game_id = game_id


class ScoreValidationError(ValueError):
    """Submitted seat scores violate the score-entry rules."""


class PlayerNotMapped(LookupError):
    """One or more player names have no ledger member id."""

    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        super().__init__(
            "No Settle Up member mapped for: " + ", ".join(self.names)
        )


class UnbalancedSettlement(ValueError):
    """Seat scores handed to the settlement mapper do not sum to zero."""

    def __init__(self, imbalance: float) -> None:
        super().__init__(
            f"Settlement is not zero-sum (off by {imbalance:.2f})"
        )
        self.imbalance = imbalance


class SheetsError(RuntimeError):
    """The Google Sheets API rejected a request or was unreachable."""


class LedgerError(RuntimeError):
    """The Settle Up API rejected a request or was unreachable."""


class LedgerAuthError(LedgerError):
    """Settle Up login failed or the token was refused."""
