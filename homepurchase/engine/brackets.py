"""Marginal-bracket tax evaluation.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class Bracket:
    upper_bound: Decimal | None  # None = unbounded
    rate: Decimal


BracketTable = tuple[Bracket, ...]


def round_currency(value: Decimal) -> Decimal:
    """Round to the cent, half away from zero."""
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def build_bracket_table(*tiers: tuple[Decimal | int | str | None, Decimal | str]) -> BracketTable:
    """Build a table from (upper_bound, rate) pairs.

    Upper bounds must be strictly increasing and only the last may be None.
    """
    table: list[Bracket] = []
    previous = Decimal("0")
    for i, (upper, rate) in enumerate(tiers):
        is_last = i == len(tiers) - 1
        if upper is None:
            if not is_last:
                raise ValueError("Only the last bracket may be unbounded")
            table.append(Bracket(upper_bound=None, rate=Decimal(str(rate))))
            continue
        bound = Decimal(str(upper))
        if bound <= previous:
            raise ValueError(f"Bracket bounds must be strictly increasing: {bound} after {previous}")
        table.append(Bracket(upper_bound=bound, rate=Decimal(str(rate))))
        previous = bound

    if not table or table[-1].upper_bound is not None:
        raise ValueError("The last bracket must be unbounded")
    return tuple(table)


def compute_marginal_tax(amount: Decimal, brackets: BracketTable) -> Decimal:
    """Tax each slice of ``amount`` at its bracket's marginal rate.

    Unrounded; callers round at their output boundary.
    """
    if amount < 0:
        raise ValueError("amount must be non-negative")

    remaining = amount
    last_threshold = Decimal("0")
    total = Decimal("0")

    for bracket in brackets:
        if remaining <= 0:
            break
        if bracket.upper_bound is None:
            span = remaining
        else:
            span = min(remaining, bracket.upper_bound - last_threshold)
            last_threshold = bracket.upper_bound
        total += span * bracket.rate
        remaining -= span

    return total
