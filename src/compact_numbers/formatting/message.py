"""Helpers for using compact numbers inside formatted messages.

Message formatters that accept rich values may return a single chunk or a
list of chunks. A chunk is plain text, a :class:`CompactNumber`, a nested list
of chunks, or any other rich element (markup, widgets) the caller passed in.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from decimal import Decimal
from typing import Any, Protocol

from babel import Locale

from ..errors import MissingLocaleDataError
from ..locales.tags import parse_tag
from ..models.options import CompactNumberOptions
from .compact_number import CompactNumber, Number, format_compact_number
from .context import GetNumberFormat, IntlContext
from .number_format import NumberFormatFactory


class CompactFormatter(Protocol):
    def __call__(self, value: Number, options: CompactNumberOptions | dict | None = None) -> CompactNumber: ...


def create_formatter(context: IntlContext, get_number_format: GetNumberFormat | None = None) -> CompactFormatter:
    """Bind ``format_compact_number`` to *context*.

    Reports a :class:`MissingLocaleDataError` through ``on_error`` when the
    registry has nothing for the context's locale; formatting then falls back
    to the default locale's data.

    A custom *get_number_format* must resolve locales against the context's
    registry: rounded values are read from ``context.registry``.
    A factory exposing a different ``registry`` raises :class:`ValueError`.
    """
    if getattr(get_number_format, "registry", context.registry) is not context.registry:
        raise ValueError("get_number_format is bound to a different registry than the context")
    if not context.registry.supported_locales_of(context.locale):
        context.on_error(
            MissingLocaleDataError(f'Missing locale data for locale: "{context.locale}" of compact number API.')
        )
    if get_number_format is None:
        get_number_format = NumberFormatFactory(context.registry)
    return functools.partial(format_compact_number, get_number_format, context)


def _flatten(chunks: list) -> list:
    flat = []
    for chunk in chunks:
        if isinstance(chunk, list):
            flat.extend(_flatten(chunk))
        elif isinstance(chunk, CompactNumber):
            flat.append(chunk.to_string())
        else:
            flat.append(chunk)
    return flat


def normalize(output: Any) -> Any:
    """Replace every compact number in *output* with its string.

    A list made only of text collapses into one string; a list that still
    holds rich elements is returned flattened. A single chunk becomes text.
    """
    if isinstance(output, list):
        flat = _flatten(output)
        if all(isinstance(chunk, str) for chunk in flat):
            return "".join(flat)
        return flat
    if isinstance(output, CompactNumber):
        return output.to_string()
    return str(output)


def wrap_format_message(format_message: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a message-format callable so its output is normalized."""

    @functools.wraps(format_message)
    def bound_format_message(*args, **kwargs):
        return normalize(format_message(*args, **kwargs))

    return bound_format_message


def select_plural_category(locale: str, value: Number | CompactNumber) -> str:
    """CLDR plural category for *value*; compact numbers use their rounded value.

    Infinity and NaN have no plural operands and always select ``"other"``.
    """
    if isinstance(value, CompactNumber):
        value = value.to_number()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    number = value if isinstance(value, (int, Decimal)) else Decimal(repr(value))
    if isinstance(number, Decimal) and not number.is_finite():
        return "other"
    return Locale.parse(parse_tag(locale).base, sep="-").plural_form(number)
