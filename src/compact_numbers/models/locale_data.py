"""Per-locale compact number tables extracted from CLDR.

A compact pattern table maps a plural category to the magnitude buckets it
covers, each bucket holding the CLDR pattern for that magnitude::

    {"one": {"1000": "0K", "10000": "00K"}, "other": {"1000": "0K", ...}}

Magnitudes are kept as decimal strings so the JSON form matches CLDR. One
instance is shared by every tag a locale is registered under, so all nested
tables are exposed as read-only mappings.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

CompactPatternTable = Mapping[str, Mapping[str, str]]

CompactStyle = Literal["short", "long"]


def _read_only_table(table: Mapping[str, Mapping[str, str]]) -> CompactPatternTable:
    return MappingProxyType({category: MappingProxyType(dict(by_size)) for category, by_size in table.items()})


class CompactStyles(BaseModel):
    """Short and long compact patterns for one numbering system."""

    model_config = ConfigDict(frozen=True)

    short: CompactPatternTable = Field(default_factory=dict, validate_default=True)
    long: CompactPatternTable = Field(default_factory=dict, validate_default=True)

    @field_validator("short", "long", mode="after")
    @classmethod
    def freeze_tables(cls, table: CompactPatternTable) -> CompactPatternTable:
        return _read_only_table(table)

    @field_serializer("short", "long")
    def dump_tables(self, table: CompactPatternTable) -> dict[str, dict[str, str]]:
        return {category: dict(by_size) for category, by_size in table.items()}

    def get(self, style: CompactStyle) -> CompactPatternTable:
        return self.long if style == "long" else self.short


# numbering system -> styles
LocaleCompactTable = Mapping[str, CompactStyles]


class NumberFormatLocaleData(BaseModel):
    """Everything the compact engine needs to know about one locale."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    numbering_systems: tuple[str, ...] = Field(default=(), alias="numberingSystems")
    decimal: LocaleCompactTable = Field(default_factory=dict, validate_default=True)
    currency: LocaleCompactTable = Field(default_factory=dict, validate_default=True)

    @field_validator("decimal", "currency", mode="after")
    @classmethod
    def freeze_tables(cls, table: LocaleCompactTable) -> LocaleCompactTable:
        return MappingProxyType(dict(table))

    @field_serializer("decimal", "currency")
    def dump_tables(self, table: LocaleCompactTable) -> dict[str, CompactStyles]:
        return dict(table)

    def compact_patterns(
        self,
        numbering_system: str,
        *,
        currency: bool = False,
        style: CompactStyle = "short",
    ) -> CompactPatternTable | None:
        """Return the pattern table used for a formatting request.

        Currency compact formats only exist in the short style, so ``style``
        is ignored for currency.
        """
        if currency:
            styles = self.currency.get(numbering_system)
            return styles.short if styles is not None else None
        styles = self.decimal.get(numbering_system)
        return styles.get(style) if styles is not None else None
