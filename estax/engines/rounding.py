"""Rounding and clamping helpers shared by the worksheet engines."""

from decimal import ROUND_HALF_UP, Decimal, localcontext

CENT = Decimal("0.01")


def round_half_up(value: Decimal) -> Decimal:
    """Round to exactly two decimal places, ties away from zero.

    123.455 -> 123.46 and -123.455 -> -123.46. Works for any finite value,
    however many integer digits it has.
    """
    with localcontext() as ctx:
        # Room for every integer digit plus the two cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def max_decimal(a: Decimal, b: Decimal) -> Decimal:
    """Return the larger of two decimals (used to floor worksheet lines at zero)."""
    return a if a > b else b
