"""Compact number value objects.

A :class:`CompactNumber` is created for one number and one set of options. It
converts to the compact string (``"1.5K"``), to typed parts, or to the rounded
number that matches the string (``1500``) and should drive plural selection.
999 500 formats as ``"1M"`` and its number is ``1000000``, not ``999500``.

All three outputs are computed on first access and cached. Formatting never
raises: if the formatter cannot be built or a computation fails, the error is
reported once through the context's ``on_error`` and a plain rendering of the
raw value is returned instead.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from decimal import Decimal
from typing import Any, ClassVar, Generic, TypeVar

from ..errors import (
    CompactNumberError,
    FormatComputationError,
    FormatterConstructionError,
    MissingLocaleDataError,
)
from ..models.options import CompactNumberOptions, LocaleDataOptions, NumberFormatPart
from .context import Formatter, GetNumberFormat, IntlContext, get_formatter
from .exponent import compact_pattern_table, compute_exponent
from .rounding import format_numeric_to_string, rescale, to_decimal

T = TypeVar("T")

Number = int | float | Decimal


class _Memo(Generic[T]):
    """Compute-once cell, safe to read from several threads."""

    __slots__ = ("_lock", "_done", "_value")

    def __init__(self):
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None

    def get(self, compute: Callable[[], T]) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    self._value = compute()
                    self._done = True
        return self._value


def _plain_number(value: Decimal) -> int | float:
    return int(value) if value == value.to_integral_value() else float(value)


def _plain_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class CompactNumber:
    """Lazily formatted compact number; see the module docstring."""

    kind: ClassVar[str] = "compact_number"

    def __init__(
        self,
        value: Number,
        formatter: Formatter | None,
        context: IntlContext,
        *,
        failure_reported: bool = False,
    ):
        self._value = value
        self._formatter = formatter
        self._context = context
        self._failure_reported = failure_reported
        self._report_lock = threading.Lock()
        self._number: _Memo[int | float | Decimal] = _Memo()
        self._string: _Memo[str] = _Memo()
        self._parts: _Memo[tuple[NumberFormatPart, ...]] = _Memo()

    @property
    def value(self) -> Number:
        """The raw number this object was created for."""
        return self._value

    def to_number(self) -> int | float | Decimal:
        """Rounded number matching the formatted string, for plural selection."""
        return self._number.get(lambda: self._guarded(self._compute_number, lambda: self._value))

    def to_string(self) -> str:
        return self._string.get(
            lambda: self._guarded(lambda nf: nf.format(self._value), lambda: _plain_text(self._value))
        )

    def to_parts(self) -> tuple[NumberFormatPart, ...]:
        return self._parts.get(
            lambda: self._guarded(
                lambda nf: tuple(nf.format_to_parts(self._value)),
                lambda: (NumberFormatPart(type="literal", value=_plain_text(self._value)),),
            )
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"CompactNumber({self._value!r})"

    # ── Internals ─────────────────────────────────────────────────────────

    def _guarded(self, compute: Callable[[Formatter], T], fallback: Callable[[], T]) -> T:
        if self._formatter is None:
            return fallback()
        try:
            return compute(self._formatter)
        except Exception as e:
            self._report_once(FormatComputationError("Error formatting the compact number.", e))
            return fallback()

    def _report_once(self, error: CompactNumberError) -> None:
        with self._report_lock:
            if self._failure_reported:
                return
            self._failure_reported = True
        self._context.on_error(error)

    def _compute_number(self, nf: Formatter) -> int | float:
        resolved = nf.resolved_options()
        data = self._context.registry.get_locale_data(
            resolved.locale,
            LocaleDataOptions(numbering_system=resolved.numbering_system),
        )
        if data is None:
            raise MissingLocaleDataError(f'Missing locale data for locale "{resolved.locale}"')

        x = to_decimal(self._value)
        if not x.is_finite():
            return self._value

        exponent, _ = compute_exponent(compact_pattern_table(data, resolved), resolved, x)
        numeric = rescale(x, exponent)
        rounded = format_numeric_to_string(resolved, numeric).rounded
        return _plain_number(rounded.scaleb(exponent))


def format_compact_number(
    get_number_format: GetNumberFormat,
    context: IntlContext,
    value: Number,
    options: CompactNumberOptions | dict | None = None,
) -> CompactNumber:
    """Create a :class:`CompactNumber` for *value* in the context's locale.

    *options* accepts the same keys as :class:`CompactNumberOptions`; the
    notation is always compact.
    *get_number_format* and *context* must share one registry.
    """
    formatter = None
    try:
        if not isinstance(options, CompactNumberOptions):
            options = CompactNumberOptions.model_validate(options or {})
        formatter = get_formatter(context, get_number_format, options, notation="compact")
    except Exception as e:
        context.on_error(FormatterConstructionError("Error creating formatter for the compact number.", e))

    return CompactNumber(value, formatter, context, failure_reported=formatter is None)


def is_compact_number(value: object) -> bool:
    return isinstance(value, CompactNumber)
