"""Minor-unit money arithmetic shared by the aggregator, planner and graph."""

from decimal import ROUND_HALF_UP, Decimal

MINOR_UNITS_PER_MAJOR = 100
CENT = Decimal("0.01")


def to_minor_units(amount: Decimal | int | str) -> int:
    """
    Convert a major-unit amount to integer minor units (cents).
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Major-unit amount

    Returns:
        Amount in minor units (integer)
    """
    minor = Decimal(amount) * MINOR_UNITS_PER_MAJOR
    return int(minor.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(minor: int) -> Decimal:
    """Convert integer minor units back to a 2-dp major-unit Decimal."""
    return (Decimal(minor) / MINOR_UNITS_PER_MAJOR).quantize(CENT)


def allocate_evenly(total_minor: int, count: int) -> list[int]:
    """
    Divide a minor-unit total into `count` near-equal integer shares.

    The leftover units of an uneven division go one each to the first
    shares, so the result always sums back to `total_minor`.

    Example:
        allocate_evenly(10000, 3) == [3334, 3333, 3333]
    """
    if count <= 0:
        raise ValueError(f"Cannot allocate between {count} shares")

    base, remainder = divmod(total_minor, count)
    return [base + 1 if i < remainder else base for i in range(count)]


def divide_rounded(total_minor: int, count: int) -> int:
    """Divide minor units by a count, rounding half up to the nearest unit."""
    quotient = Decimal(total_minor) / count
    return int(quotient.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
