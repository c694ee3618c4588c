"""Build CLDR-JSON shaped ``numbers`` documents from Babel's locale data.

Babel ships the CLDR compact patterns pre-parsed, which makes it a convenient
source when the raw ``cldr-numbers-*`` JSON packages are not available. Babel
only keeps the compact patterns of a locale's default numbering system, so the
tables produced here are labelled with that system (``latn`` for ``en``,
``arabext`` for ``fa``).
"""

from __future__ import annotations

from typing import Any

from babel import Locale

from ..locales.tags import parse_tag


def _compact_formats(locale: Locale, attribute: str) -> dict:
    try:
        return getattr(locale, attribute)
    except KeyError:
        return {}


def _encode_format_node(by_count: Any) -> dict[str, str]:
    node: dict[str, str] = {}
    for count, by_magnitude in by_count.items():
        for magnitude, pattern in by_magnitude.items():
            node[f"{magnitude}-count-{count}"] = getattr(pattern, "pattern", pattern)
    return node


def babel_numbers_tree(locale: str) -> dict[str, Any]:
    """Return ``{"main": {locale: {"numbers": {...}}}}`` for *locale*.

    Raises:
        InvalidLocaleError: *locale* is not a well-formed tag.
        babel.core.UnknownLocaleError: Babel has no data for *locale*.
    """
    babel_locale = Locale.parse(parse_tag(locale).base, sep="-")
    decimal = _compact_formats(babel_locale, "compact_decimal_formats")
    currency = _compact_formats(babel_locale, "compact_currency_formats")

    numbering_system = babel_locale.default_numbering_system
    suffix = f"numberSystem-{numbering_system}"
    numbers: dict[str, Any] = {
        "defaultNumberingSystem": numbering_system,
        f"decimalFormats-{suffix}": {
            style: {"decimalFormat": _encode_format_node(decimal.get(style, {}))}
            for style in ("long", "short")
        },
    }
    if currency:
        numbers[f"currencyFormats-{suffix}"] = {
            "short": {"standard": _encode_format_node(currency.get("short", {}))},
        }
    return {"main": {locale: {"numbers": numbers}}}
