"""In-memory store of compact number locale data with locale negotiation."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from ..errors import MissingLocaleDataError
from ..models.locale_data import NumberFormatLocaleData
from ..models.options import LocaleDataOptions, LocaleMatcher
from .tags import (
    ResolvedLocale,
    canonicalize_locale_list,
    minimize_locale,
    parse_tag,
    resolve_locale,
    supported_locales,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    data: Mapping[str, NumberFormatLocaleData] = field(default_factory=lambda: MappingProxyType({}))
    available: frozenset[str] = frozenset()
    default_locale: str | None = None


class LocaleDataRegistry:
    """Locale data store shared by every formatter built on it.

    Writes (``add_locale_data``, ``set_default_locale``) are serialized by a
    lock and publish a new immutable snapshot; reads use whichever snapshot is
    current and never lock.

    Every locale is stored under its own tag and its minimized tag, both
    pointing at the same ``NumberFormatLocaleData`` instance. The first
    registration picks the default locale.

    ``locale_matcher`` is used by reads whose options leave the matcher unset.
    """

    def __init__(self, locale_matcher: LocaleMatcher = "best fit"):
        self.locale_matcher = locale_matcher
        self._lock = threading.Lock()
        self._snapshot = _Snapshot()

    # ── Writes ────────────────────────────────────────────────────────────

    def add_locale_data(self, locale: str, data: NumberFormatLocaleData) -> None:
        locale = str(parse_tag(locale))
        minimized = minimize_locale(locale)
        with self._lock:
            current = self._snapshot
            entries = dict(current.data)
            entries[locale] = data
            entries[minimized] = data
            default_locale = current.default_locale if current.default_locale is not None else minimized
            self._snapshot = _Snapshot(
                data=MappingProxyType(entries),
                available=current.available | {locale, minimized},
                default_locale=default_locale,
            )
        logger.debug("locale_data_added", locale=locale, minimized=minimized, default_locale=default_locale)

    def set_default_locale(self, locale: str) -> None:
        """Make *locale* (or its minimized form) the fallback locale."""
        with self._lock:
            current = self._snapshot
            locale = str(parse_tag(locale))
            apply = locale
            if apply not in current.available:
                apply = minimize_locale(locale)
                if apply == locale:
                    raise MissingLocaleDataError(
                        f'No compact number data has been loaded for locale "{locale}"'
                    )
                if apply not in current.available:
                    raise MissingLocaleDataError(
                        f'No compact number data has been loaded for locale "{locale}", '
                        f'nor its minimized variant "{apply}"'
                    )
            self._snapshot = _Snapshot(current.data, current.available, apply)
        logger.info("default_locale_set", locale=apply)

    # ── Reads ─────────────────────────────────────────────────────────────

    def get_default_locale(self) -> str:
        return _default_of(self._snapshot)

    @property
    def available_locales(self) -> frozenset[str]:
        return self._snapshot.available

    def __contains__(self, locale: object) -> bool:
        return locale in self._snapshot.available

    def resolve_locale(
        self,
        locales: str | Iterable[str] | None,
        options: LocaleDataOptions | None = None,
    ) -> ResolvedLocale:
        """Negotiate *locales* against the registered data.

        Falls back to the default locale when nothing matches, so this raises
        :class:`MissingLocaleDataError` only on an empty registry.
        """
        options = self._with_matcher(options)
        requested = canonicalize_locale_list(locales)
        snapshot = self._snapshot
        return resolve_locale(
            snapshot.available,
            requested,
            options,
            snapshot.data,
            lambda: _default_of(snapshot),
        )

    def get_locale_data(
        self,
        locales: str | Iterable[str] | None,
        options: LocaleDataOptions | None = None,
    ) -> NumberFormatLocaleData | None:
        """Return the data that best matches *locales* (shared, never copied)."""
        resolved = self.resolve_locale(locales, options)
        return self._snapshot.data.get(resolved.data_locale)

    def supported_locales_of(
        self,
        locales: str | Iterable[str] | None,
        options: LocaleDataOptions | None = None,
    ) -> list[str]:
        """Requested locales that have data here, in request order, no fallback."""
        options = self._with_matcher(options)
        return supported_locales(
            self._snapshot.available,
            canonicalize_locale_list(locales),
            options.locale_matcher,
        )

    def _with_matcher(self, options: LocaleDataOptions | None) -> LocaleDataOptions:
        if options is None:
            return LocaleDataOptions(locale_matcher=self.locale_matcher)
        if "locale_matcher" in options.model_fields_set:
            return options
        return options.model_copy(update={"locale_matcher": self.locale_matcher})


def _default_of(snapshot: _Snapshot) -> str:
    if snapshot.default_locale is None:
        raise MissingLocaleDataError("No compact number data has been loaded")
    return snapshot.default_locale
