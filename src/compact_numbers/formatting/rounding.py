"""Rounding of a (possibly rescaled) value to the digits a formatter shows.

All arithmetic is done on ``Decimal`` with round-half-expand (``ROUND_HALF_UP``
in ``decimal`` terms, which rounds ties away from zero) so results match what
the user sees, not binary floating point.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal

from ..models.options import ResolvedNumberFormatOptions

# Wide enough for 1e308 with 100 fraction digits
_CONTEXT = Context(prec=512, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class RoundedNumber:
    """Result of rounding: the numeric value and its plain ASCII digits.

    ``digits`` uses ``.`` as decimal separator, has no sign and no grouping,
    and already honours the minimum integer/fraction/significant digits.
    """

    rounded: Decimal
    digits: str


def to_decimal(value: int | float | Decimal | str) -> Decimal:
    """Convert an input number to ``Decimal`` without binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Cannot format a bool as a number")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"Cannot format {type(value).__name__} as a number")


def magnitude(x: Decimal) -> int:
    """``floor(log10(|x|))``, with 0 for zero."""
    if x.is_zero():
        return 0
    return x.adjusted()


def rescale(x: Decimal, exponent: int) -> Decimal:
    """Divide by ``10**exponent`` (multiply when negative) exactly."""
    return x.scaleb(-exponent, context=_CONTEXT)


def _trim_fraction(text: str, keep: int) -> str:
    integer, _, fraction = text.partition(".")
    while len(fraction) > keep and fraction.endswith("0"):
        fraction = fraction[:-1]
    return f"{integer}.{fraction}" if fraction else integer


def _to_raw_precision(x: Decimal, min_sig: int, max_sig: int) -> tuple[Decimal, str]:
    quantum = Decimal(1).scaleb(magnitude(x) - max_sig + 1)
    rounded = x.quantize(quantum, context=_CONTEXT)
    text = format(rounded, "f")
    keep = max(0, min_sig - 1 - magnitude(rounded))
    return rounded, _trim_fraction(text, keep)


def _to_raw_fixed(x: Decimal, min_frac: int, max_frac: int) -> tuple[Decimal, str]:
    rounded = x.quantize(Decimal(1).scaleb(-max_frac), context=_CONTEXT)
    return rounded, _trim_fraction(format(rounded, "f"), min_frac)


def format_numeric_to_string(options: ResolvedNumberFormatOptions, x: Decimal) -> RoundedNumber:
    """Round *x* according to the formatter's digit options.

    ``morePrecision`` (the compact default) rounds both to significant digits
    and to fraction digits and keeps whichever result carries more precision,
    preferring significant digits on a tie: 1.456 → 1.5, 14.56 → 15,
    145.6 → 146.
    """
    negative = x.is_signed() and not x.is_zero()
    x = x.copy_abs()

    if options.rounding_type == "significantDigits":
        rounded, text = _to_raw_precision(
            x, options.minimum_significant_digits or 1, options.maximum_significant_digits or 21
        )
    elif options.rounding_type == "fractionDigits":
        rounded, text = _to_raw_fixed(x, options.minimum_fraction_digits, options.maximum_fraction_digits)
    else:
        min_sig = options.minimum_significant_digits or 1
        max_sig = options.maximum_significant_digits or 2
        sig_magnitude = magnitude(x) - max_sig + 1
        frac_magnitude = -options.maximum_fraction_digits
        if sig_magnitude <= frac_magnitude:
            rounded, text = _to_raw_precision(x, min_sig, max_sig)
        else:
            rounded, text = _to_raw_fixed(x, options.minimum_fraction_digits, options.maximum_fraction_digits)

    integer, dot, fraction = text.partition(".")
    if len(integer) < options.minimum_integer_digits:
        text = integer.rjust(options.minimum_integer_digits, "0") + dot + fraction

    return RoundedNumber(rounded=-rounded if negative else rounded, digits=text)
