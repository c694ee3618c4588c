"""Formatting context shared by the compact engine and the message helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from ..errors import CompactNumberError, UnsupportedFormatterError
from ..locales.registry import LocaleDataRegistry
from ..models.options import (
    CompactNumberOptions,
    Notation,
    NumberFormatOptions,
    NumberFormatPart,
    ResolvedNumberFormatOptions,
)

logger = structlog.get_logger(__name__)

OnError = Callable[[CompactNumberError], None]


class Formatter(Protocol):
    def format(self, value) -> str: ...

    def format_to_parts(self, value) -> list[NumberFormatPart]: ...

    def resolved_options(self) -> ResolvedNumberFormatOptions: ...


GetNumberFormat = Callable[[str | Iterable[str] | None, NumberFormatOptions], Formatter]


def log_error(error: CompactNumberError) -> None:
    """Default ``on_error``: emit a structured error event and carry on."""
    logger.error(
        "compact_number_error",
        code=str(error.code),
        error=error.message,
        cause=repr(error.original_error) if error.original_error else None,
    )


@dataclass
class IntlContext:
    """Locale, error callback and named formats for one formatting scope.

    ``formats`` maps a preset name to options used as defaults when a call
    passes ``format="<name>"``.
    Number formatters used with this context must resolve locales against
    ``registry``.
    """

    locale: str | list[str]
    registry: LocaleDataRegistry
    on_error: OnError = log_error
    formats: dict[str, CompactNumberOptions] = field(default_factory=dict)


def get_formatter(
    context: IntlContext,
    get_number_format: GetNumberFormat,
    options: CompactNumberOptions,
    notation: Notation = "standard",
) -> Formatter:
    """Merge named-format defaults with *options* and build a formatter."""
    defaults: dict = {}
    if options.format is not None:
        preset = context.formats.get(options.format)
        if preset is None:
            context.on_error(UnsupportedFormatterError(f'No number format named: "{options.format}"'))
        else:
            defaults = preset.model_dump(exclude_unset=True, exclude={"format", "notation"})

    explicit = options.model_dump(exclude_unset=True, exclude={"format", "notation"})
    merged = NumberFormatOptions(**{**defaults, **explicit, "notation": notation})
    return get_number_format(context.locale, merged)
