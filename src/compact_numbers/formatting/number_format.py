"""Number formatting primitive backed by Babel's CLDR data.

``NumberFormat`` plays the role of ``Intl.NumberFormat``: it resolves a locale
against a :class:`LocaleDataRegistry`, validates the digit options and renders
numbers to a string or to typed parts. Compact patterns come from the registry
so the formatter and the compact engine always agree on buckets; symbols,
grouping sizes, currency symbols and plural rules come from Babel.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable
from decimal import Decimal

from babel import Locale
from babel.numbers import get_currency_precision, get_currency_symbol

from ..errors import MissingLocaleDataError
from ..locales.registry import LocaleDataRegistry
from ..models.locale_data import CompactPatternTable
from ..models.options import (
    NumberFormatOptions,
    NumberFormatPart,
    ResolvedNumberFormatOptions,
)
from .exponent import bucket_for_magnitude, compact_pattern_table, compute_exponent, is_uncompacted
from .rounding import RoundedNumber, format_numeric_to_string, rescale, to_decimal

# Zero digit of each decimal numbering system; the other nine follow it
NUMBERING_SYSTEM_ZEROS = {
    "latn": "0",
    "arab": "\u0660",
    "arabext": "\u06f0",
    "beng": "\u09e6",
    "deva": "\u0966",
    "fullwide": "\uff10",
    "gujr": "\u0ae6",
    "guru": "\u0a66",
    "khmr": "\u17e0",
    "knda": "\u0ce6",
    "laoo": "\u0ed0",
    "mlym": "\u0d66",
    "mymr": "\u1040",
    "orya": "\u0b66",
    "tamldec": "\u0be6",
    "telu": "\u0c66",
    "thai": "\u0e50",
    "tibt": "\u0f20",
}

_CURRENCY_CODE = re.compile(r"^[A-Za-z]{3}$")
_NUMBER_CHARS = set("0#@,.")
_BIDI_MARKS = set("\u200e\u200f\u061c")
_NBSP = "\u00a0"


def _digit_option(value: int | None, low: int, high: int, fallback: int | None, name: str) -> int | None:
    if value is None:
        return fallback
    if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
        raise ValueError(f"{name} value is out of range.")
    return value


def resolve_digit_options(options: NumberFormatOptions) -> dict:
    """Resolve integer/fraction/significant digits and the rounding type."""
    if options.style == "currency":
        default_min_fraction = default_max_fraction = get_currency_precision(options.currency.upper())
    elif options.style == "percent":
        default_min_fraction, default_max_fraction = 0, 0
    else:
        default_min_fraction, default_max_fraction = 0, 3

    has_significant = (
        options.minimum_significant_digits is not None or options.maximum_significant_digits is not None
    )
    has_fraction = options.minimum_fraction_digits is not None or options.maximum_fraction_digits is not None

    resolved = {
        "minimum_integer_digits": _digit_option(options.minimum_integer_digits, 1, 21, 1, "minimum_integer_digits"),
    }

    if has_significant:
        min_sig = _digit_option(options.minimum_significant_digits, 1, 21, 1, "minimum_significant_digits")
        max_sig = _digit_option(options.maximum_significant_digits, min_sig, 21, 21, "maximum_significant_digits")
        resolved.update(
            rounding_type="significantDigits",
            minimum_significant_digits=min_sig,
            maximum_significant_digits=max_sig,
        )
        return resolved

    if has_fraction:
        min_frac = _digit_option(options.minimum_fraction_digits, 0, 100, None, "minimum_fraction_digits")
        max_frac = _digit_option(options.maximum_fraction_digits, 0, 100, None, "maximum_fraction_digits")
        if min_frac is None:
            min_frac = min(default_min_fraction, max_frac)
        elif max_frac is None:
            max_frac = max(default_max_fraction, min_frac)
        elif min_frac > max_frac:
            raise ValueError("minimum_fraction_digits is greater than maximum_fraction_digits.")
        resolved.update(rounding_type="fractionDigits", minimum_fraction_digits=min_frac, maximum_fraction_digits=max_frac)
        return resolved

    if options.notation == "compact":
        resolved.update(
            rounding_type="morePrecision",
            minimum_significant_digits=1,
            maximum_significant_digits=2,
            minimum_fraction_digits=0,
            maximum_fraction_digits=0,
        )
        return resolved

    resolved.update(
        rounding_type="fractionDigits",
        minimum_fraction_digits=default_min_fraction,
        maximum_fraction_digits=default_max_fraction,
    )
    return resolved


class NumberFormat:
    """Locale-aware number formatter with standard and compact notation."""

    def __init__(
        self,
        locales: str | Iterable[str] | None,
        options: NumberFormatOptions | None,
        registry: LocaleDataRegistry,
    ):
        options = options or NumberFormatOptions()

        currency = None
        if options.style == "currency":
            if options.currency is None:
                raise TypeError("Currency code is required with currency style.")
            if not _CURRENCY_CODE.match(options.currency):
                raise ValueError(f"Invalid currency code: {options.currency}")
            currency = options.currency.upper()

        resolved_locale = registry.resolve_locale(locales, options)
        data = registry.get_locale_data(resolved_locale.data_locale)
        if data is None:
            raise MissingLocaleDataError(f'Missing locale data for locale "{resolved_locale.data_locale}"')

        if options.use_grouping is None:
            use_grouping = "min2" if options.notation == "compact" else "auto"
        elif options.use_grouping is True:
            use_grouping = "always"
        else:
            use_grouping = options.use_grouping

        self._resolved = ResolvedNumberFormatOptions(
            locale=resolved_locale.locale,
            numbering_system=resolved_locale.numbering_system,
            style=options.style,
            currency=currency,
            currency_display=options.currency_display if currency else None,
            notation=options.notation,
            compact_display=options.compact_display if options.notation == "compact" else None,
            sign_display=options.sign_display,
            use_grouping=use_grouping,
            **resolve_digit_options(options),
        )
        self._babel_locale = Locale.parse(resolved_locale.data_locale, sep="-")
        self._compact_table = compact_pattern_table(data, self._resolved) if options.notation == "compact" else None

        all_symbols = self._babel_locale.number_symbols
        self._symbols = all_symbols.get(self._resolved.numbering_system) or all_symbols["latn"]
        self._zero = NUMBERING_SYSTEM_ZEROS.get(self._resolved.numbering_system, "0")

    def resolved_options(self) -> ResolvedNumberFormatOptions:
        return self._resolved

    def format(self, value: int | float | Decimal | str) -> str:
        return "".join(part.value for part in self.format_to_parts(value))

    def format_to_parts(self, value: int | float | Decimal | str) -> list[NumberFormatPart]:
        x = to_decimal(value)
        if x.is_nan():
            return [NumberFormatPart(type="nan", value=self._symbols.get("nan", "NaN"))]

        negative = x.is_signed() and not x.is_zero()
        x = x.copy_abs()
        if self._resolved.style == "percent":
            x = x * 100

        pattern = None
        if x.is_infinite():
            number_parts = [NumberFormatPart(type="infinity", value=self._symbols.get("infinity", "∞"))]
            is_zero = False
        else:
            rounded, pattern = self._round(x)
            number_parts = self._number_parts(rounded.digits)
            is_zero = rounded.rounded.is_zero()

        parts = self._sign_parts(negative, is_zero)
        parts.extend(self._apply_pattern(pattern or self._standard_pattern(), number_parts, compact=pattern is not None))
        return parts

    # ── Internals ─────────────────────────────────────────────────────────

    def _round(self, x: Decimal) -> tuple[RoundedNumber, str | None]:
        """Round *x*, returning the compact pattern to use (``None`` for standard)."""
        if self._resolved.notation != "compact" or not self._compact_table:
            return format_numeric_to_string(self._resolved, x), None

        exponent, mag = compute_exponent(self._compact_table, self._resolved, x)
        rounded = format_numeric_to_string(self._resolved, rescale(x, exponent))
        if exponent == 0:
            return rounded, None
        return rounded, self._compact_pattern(self._compact_table, mag, rounded)

    def _compact_pattern(self, table: CompactPatternTable, mag: int, rounded: RoundedNumber) -> str | None:
        bucket = bucket_for_magnitude(table, mag)
        if bucket is None:
            return None
        category = self._babel_locale.plural_form(Decimal(rounded.digits))
        pattern = table.get(category, {}).get(bucket) or table.get("other", {}).get(bucket)
        if pattern is None or is_uncompacted(pattern):
            return None
        return pattern.split(";")[0]

    def _standard_pattern(self) -> str:
        if self._resolved.style == "currency":
            return self._babel_locale.currency_formats["standard"].pattern.split(";")[0]
        if self._resolved.style == "percent":
            return self._babel_locale.percent_formats[None].pattern.split(";")[0]
        return "0"

    def _sign_parts(self, negative: bool, is_zero: bool) -> list[NumberFormatPart]:
        display = self._resolved.sign_display
        if display == "never" or (display == "exceptZero" and is_zero):
            return []
        if negative:
            return [NumberFormatPart(type="minusSign", value=self._symbols.get("minusSign", "-"))]
        if display in ("always", "exceptZero"):
            return [NumberFormatPart(type="plusSign", value=self._symbols.get("plusSign", "+"))]
        return []

    def _digits(self, text: str) -> str:
        if self._zero == "0":
            return text
        offset = ord(self._zero) - ord("0")
        return "".join(chr(ord(ch) + offset) for ch in text)

    def _should_group(self, integer_length: int, primary: int) -> bool:
        use_grouping = self._resolved.use_grouping
        if use_grouping is False:
            return False
        if use_grouping == "min2":
            return integer_length >= primary + 2
        return integer_length > primary

    def _number_parts(self, digits: str) -> list[NumberFormatPart]:
        integer, _, fraction = digits.partition(".")
        primary, secondary = self._babel_locale.decimal_formats[None].grouping

        groups = [integer]
        if primary and self._should_group(len(integer), primary):
            groups = [integer[-primary:]]
            rest = integer[:-primary]
            size = secondary or primary
            while rest:
                groups.insert(0, rest[-size:])
                rest = rest[:-size]

        parts: list[NumberFormatPart] = []
        for i, group in enumerate(groups):
            if i:
                parts.append(NumberFormatPart(type="group", value=self._symbols.get("group", ",")))
            parts.append(NumberFormatPart(type="integer", value=self._digits(group)))
        if fraction:
            parts.append(NumberFormatPart(type="decimal", value=self._symbols.get("decimal", ".")))
            parts.append(NumberFormatPart(type="fraction", value=self._digits(fraction)))
        return parts

    def _currency_text(self) -> str:
        if self._resolved.currency_display == "code":
            return self._resolved.currency
        return get_currency_symbol(self._resolved.currency, self._babel_locale)

    def _apply_pattern(
        self,
        pattern: str,
        number_parts: list[NumberFormatPart],
        *,
        compact: bool,
    ) -> list[NumberFormatPart]:
        """Expand a CLDR pattern around the rendered number.

        Quoted text is literal (``''`` is a quote). Outside the number, ``¤``
        becomes the currency and ``%`` the percent sign; any other text is a
        ``compact`` part in compact patterns (whitespace and bidi marks stay
        ``literal``).
        """
        tokens: list[tuple[str, str]] = []
        literal = ""
        number_done = False
        i = 0

        def flush():
            nonlocal literal
            if literal:
                tokens.append(("text", literal))
                literal = ""

        while i < len(pattern):
            ch = pattern[i]
            if ch == "'":
                end = pattern.find("'", i + 1)
                if end == i + 1:
                    literal += "'"
                    i += 2
                    continue
                end = len(pattern) if end == -1 else end
                literal += pattern[i + 1:end]
                i = end + 1
                continue
            if ch in _NUMBER_CHARS and not number_done:
                flush()
                while i < len(pattern) and pattern[i] in _NUMBER_CHARS:
                    i += 1
                tokens.append(("number", ""))
                number_done = True
                continue
            if ch == "¤":
                flush()
                while i < len(pattern) and pattern[i] == "¤":
                    i += 1
                tokens.append(("currency", ""))
                continue
            if ch == "%":
                flush()
                tokens.append(("percent", ""))
                i += 1
                continue
            literal += ch
            i += 1
        flush()

        parts: list[NumberFormatPart] = []
        for index, (kind, text) in enumerate(tokens):
            if kind == "number":
                parts.extend(number_parts)
            elif kind == "currency":
                symbol = self._currency_text()
                parts.append(NumberFormatPart(type="currency", value=symbol))
                # currency spacing: keep letters off the digits
                neighbour = tokens[index + 1][0] if index + 1 < len(tokens) else None
                previous = tokens[index - 1][0] if index else None
                if neighbour == "number" and symbol[-1:].isalpha():
                    parts.append(NumberFormatPart(type="literal", value=_NBSP))
                elif previous == "number" and symbol[:1].isalpha():
                    parts.insert(len(parts) - 1, NumberFormatPart(type="literal", value=_NBSP))
            elif kind == "percent":
                parts.append(NumberFormatPart(type="percentSign", value=self._symbols.get("percentSign", "%")))
            else:
                parts.extend(self._text_parts(text, compact))
        return parts

    @staticmethod
    def _text_parts(text: str, compact: bool) -> list[NumberFormatPart]:
        if not compact:
            return [NumberFormatPart(type="literal", value=text)]
        parts: list[NumberFormatPart] = []
        for chunk in re.findall(r"[\s\u200e\u200f\u061c]+|[^\s\u200e\u200f\u061c]+", text):
            kind = "literal" if chunk[0].isspace() or chunk[0] in _BIDI_MARKS else "compact"
            parts.append(NumberFormatPart(type=kind, value=chunk))
        return parts


class NumberFormatFactory:
    """Builds and caches :class:`NumberFormat` instances per locale and options.

    Instances are the ``get_number_format`` callable the compact engine
    expects. Construction errors propagate and are not cached.
    """

    def __init__(self, registry: LocaleDataRegistry):
        self._registry = registry
        self._cache: dict[tuple, NumberFormat] = {}
        self._lock = threading.Lock()

    @property
    def registry(self) -> LocaleDataRegistry:
        return self._registry

    def __call__(
        self,
        locales: str | Iterable[str] | None,
        options: NumberFormatOptions | None = None,
    ) -> NumberFormat:
        options = options or NumberFormatOptions()
        locale_key = locales if isinstance(locales, str) or locales is None else tuple(locales)
        key = (locale_key, options.model_dump_json())
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        formatter = NumberFormat(locales, options, self._registry)
        with self._lock:
            return self._cache.setdefault(key, formatter)

    def clear_cache(self):
        with self._lock:
            self._cache.clear()
