"""Error hierarchy for locale data resolution, extraction and formatting.

Every error carries an :class:`ErrorCode` so ``on_error`` callbacks can
classify failures without inspecting message text. The underlying exception,
when there is one, is kept both as ``original_error`` and as ``__cause__``.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    MISSING_DATA = "MISSING_DATA"
    MISSING_INTL_API = "MISSING_INTL_API"
    FORMAT_ERROR = "FORMAT_ERROR"
    MALFORMED_CLDR_TABLE = "MALFORMED_CLDR_TABLE"
    INVALID_LOCALE = "INVALID_LOCALE"
    UNSUPPORTED_FORMATTER = "UNSUPPORTED_FORMATTER"


class CompactNumberError(Exception):
    """Base class for all errors raised or reported by this library."""

    code: ErrorCode = ErrorCode.FORMAT_ERROR

    def __init__(self, message: str, original_error: BaseException | None = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self._format_message())
        if original_error is not None:
            self.__cause__ = original_error

    def _format_message(self) -> str:
        msg = f"[{self.code}] {self.message}"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {self.original_error}]"
        return msg


class MissingLocaleDataError(CompactNumberError):
    """No registry entry for any requested locale nor a default."""

    code = ErrorCode.MISSING_DATA


class FormatterConstructionError(CompactNumberError):
    """The number-formatting primitive rejected the resolved options."""

    code = ErrorCode.MISSING_INTL_API


class FormatComputationError(CompactNumberError):
    """Exponent, rounding or rendering failed for a single value."""

    code = ErrorCode.FORMAT_ERROR


class MalformedCldrTableError(CompactNumberError):
    """A raw CLDR tree is missing a node the extraction requires."""

    code = ErrorCode.MALFORMED_CLDR_TABLE


class InvalidLocaleError(CompactNumberError, ValueError):
    """A locale tag could not be parsed as BCP 47."""

    code = ErrorCode.INVALID_LOCALE


class UnsupportedFormatterError(CompactNumberError):
    """A named number format is not configured on the context."""

    code = ErrorCode.UNSUPPORTED_FORMATTER
