"""Number formatting options, resolved options and formatted parts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

LocaleMatcher = Literal["best fit", "lookup"]
NumberStyle = Literal["decimal", "currency", "percent"]
Notation = Literal["standard", "compact"]
CompactDisplay = Literal["short", "long"]
CurrencyDisplay = Literal["symbol", "code"]
SignDisplay = Literal["auto", "never", "always", "exceptZero"]
UseGrouping = Literal["always", "auto", "min2"]
RoundingType = Literal["fractionDigits", "significantDigits", "morePrecision"]


class LocaleDataOptions(BaseModel):
    """Negotiation options understood by the locale data registry."""

    model_config = ConfigDict(frozen=True)

    locale_matcher: LocaleMatcher = "best fit"
    numbering_system: str | None = None


class CompactNumberOptions(LocaleDataOptions):
    """Options accepted by ``format_compact_number``.

    Digit options are validated by the formatter when it is built, not here,
    so an out-of-range value surfaces as a formatter construction failure.
    ``format`` names a preset from the context's ``formats`` mapping whose
    values act as defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    format: str | None = None
    style: NumberStyle = "decimal"
    currency: str | None = None
    currency_display: CurrencyDisplay = "symbol"
    compact_display: CompactDisplay = "short"
    sign_display: SignDisplay = "auto"
    use_grouping: UseGrouping | bool | None = None

    minimum_integer_digits: int | None = None
    minimum_fraction_digits: int | None = None
    maximum_fraction_digits: int | None = None
    minimum_significant_digits: int | None = None
    maximum_significant_digits: int | None = None


class NumberFormatOptions(CompactNumberOptions):
    """Full option set of the number formatting primitive."""

    notation: Notation = "standard"


class ResolvedNumberFormatOptions(BaseModel):
    """Effective options of a constructed formatter."""

    model_config = ConfigDict(frozen=True)

    locale: str
    numbering_system: str
    style: NumberStyle = "decimal"
    currency: str | None = None
    currency_display: CurrencyDisplay | None = None
    notation: Notation = "standard"
    compact_display: CompactDisplay | None = None
    sign_display: SignDisplay = "auto"
    use_grouping: UseGrouping | Literal[False] = "auto"
    minimum_integer_digits: int = 1
    minimum_fraction_digits: int = 0
    maximum_fraction_digits: int = 3
    minimum_significant_digits: int | None = None
    maximum_significant_digits: int | None = None
    rounding_type: RoundingType = "fractionDigits"


class NumberFormatPart(BaseModel):
    """One typed chunk of a formatted number (``integer``, ``compact`` ...)."""

    model_config = ConfigDict(frozen=True)

    type: str
    value: str
