"""Pure functions for seat attribution and money arithmetic.

No store access, no async. All inputs are plain lists/floats.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Optional

# A share policy maps (names, seat score) to per-name amounts.
SharePolicy = Callable[[list[str], float], list[tuple[str, float]]]

_CENT = Decimal("0.01")


def raw_seat_attribution(
    player_names: list[str],
    score: float,
) -> list[tuple[str, float]]:
    """Give every player in the seat the full, unsplit seat score.

    Used for counting statistics (games, wins, losses, highest, lowest,
    variance) and for settlement of shared seats.

    Args:
        player_names: Names sharing the seat, in entry order.
        score: The seat's signed score.

    Returns:
        One ``(name, score)`` pair per name.
    """
    return [(name, score) for name in player_names]


def per_capita_split(
    player_names: list[str],
    score: float,
) -> list[tuple[str, float]]:
    """Split the seat score evenly across everyone in the seat.

    Used for averages, partner/co-player, monthly and running totals.

    Args:
        player_names: Names sharing the seat, in entry order.
        score: The seat's signed score.

    Returns:
        One ``(name, score / len(player_names))`` pair per name, or an
        empty list for an empty seat.
    """
    if not player_names:
        return []
    share = score / len(player_names)
    return [(name, share) for name in player_names]


def population_variance(values: list[float]) -> float:
    """Mean squared deviation from the mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a ledger amount into a finite Decimal, or None if it is not one.

    Floats go through their shortest ``repr`` so ``12.005`` stays 12.005
    instead of the nearest binary value below it.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def round_currency(amount: Decimal | float | int) -> float:
    """Round to cents, half away from zero (12.005 -> 12.01, -0.125 -> -0.13)."""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return float(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def is_zero_sum(amounts: list[float], tolerance: float) -> bool:
    return abs(sum(amounts)) <= tolerance
