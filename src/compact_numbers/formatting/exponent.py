"""Compact notation exponent selection.

Pure functions of (value, compact pattern table, resolved options). A bucket
is the smallest value a compact pattern covers (``"1000"``, ``"10000"`` ...);
its exponent is the power of ten the value is divided by before display.
``"00K"`` at bucket 10000 shows two integer digits, so its exponent is 3, not 4.
"""

from __future__ import annotations

import re
from decimal import Decimal

from ..models.locale_data import CompactPatternTable, NumberFormatLocaleData
from ..models.options import ResolvedNumberFormatOptions
from .rounding import format_numeric_to_string, magnitude, rescale

_QUOTED = re.compile(r"'[^']*'")
_ZEROS = re.compile(r"0+")


def compact_pattern_table(
    data: NumberFormatLocaleData,
    options: ResolvedNumberFormatOptions,
) -> CompactPatternTable | None:
    return data.compact_patterns(
        options.numbering_system,
        currency=options.style == "currency",
        style=options.compact_display or "short",
    )


def breakpoints(table: CompactPatternTable) -> list[int]:
    """Sorted bucket sizes, taken from ``other`` or all categories."""
    buckets = table.get("other") or {k: v for by_size in table.values() for k, v in by_size.items()}
    return sorted(int(size) for size in buckets)


def bucket_for_magnitude(table: CompactPatternTable | None, mag: int) -> str | None:
    """Largest bucket not exceeding ``10**mag``, as its table key."""
    if not table or mag < 0:
        return None
    limit = 10**mag
    fitting = [size for size in breakpoints(table) if size <= limit]
    return str(fitting[-1]) if fitting else None


def bucket_pattern(table: CompactPatternTable, bucket: str, category: str = "other") -> str | None:
    pattern = table.get(category, {}).get(bucket) or table.get("other", {}).get(bucket)
    if pattern is None:
        pattern = next((by_size[bucket] for by_size in table.values() if bucket in by_size), None)
    return pattern


def pattern_digits(pattern: str) -> int:
    """Number of integer digits a compact pattern displays (0 for none)."""
    unquoted = _QUOTED.sub("", pattern.split(";")[0])
    match = _ZEROS.search(unquoted)
    return len(match.group(0)) if match else 0


def is_uncompacted(pattern: str) -> bool:
    """CLDR uses the bare pattern ``0`` for "show the number as is"."""
    return _QUOTED.sub("", pattern.split(";")[0]).strip() == "0"


def compute_exponent_for_magnitude(table: CompactPatternTable | None, mag: int) -> int:
    bucket = bucket_for_magnitude(table, mag)
    if bucket is None:
        return 0
    pattern = bucket_pattern(table, bucket)
    if pattern is None or is_uncompacted(pattern):
        return 0
    digits = pattern_digits(pattern)
    if digits == 0:
        return 0
    return len(bucket) - 1 - (digits - 1)


def compute_exponent(
    table: CompactPatternTable | None,
    options: ResolvedNumberFormatOptions,
    x: Decimal,
) -> tuple[int, int]:
    """Return ``(exponent, magnitude)`` for displaying *x*.

    When rounding the rescaled value carries it into the next power of ten
    (999.5K → 1000K) the exponent of the next magnitude is used instead, so
    999 500 displays as 1M.
    """
    if x.is_zero() or not x.is_finite():
        return 0, 0
    x = x.copy_abs()
    mag = magnitude(x)
    exponent = compute_exponent_for_magnitude(table, mag)

    rounded = format_numeric_to_string(options, rescale(x, exponent)).rounded
    if rounded.is_zero() or magnitude(rounded) == mag - exponent:
        return exponent, mag
    return compute_exponent_for_magnitude(table, mag + 1), mag + 1
