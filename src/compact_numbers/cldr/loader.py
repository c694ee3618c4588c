"""Load extracted locale data into a registry."""

from __future__ import annotations

from pathlib import Path

import structlog

from ..config import Settings
from ..locales.registry import LocaleDataRegistry
from ..models.locale_data import NumberFormatLocaleData
from .babel_source import babel_numbers_tree
from .extraction import extract_locale_data

logger = structlog.get_logger(__name__)


def read_locale_data(path: Path) -> NumberFormatLocaleData:
    """Read one generated ``<locale>.json`` file."""
    if not path.exists():
        raise FileNotFoundError(f"Locale data not found: {path}")
    return NumberFormatLocaleData.model_validate_json(path.read_text(encoding="utf-8"))


def load_locale_data_dir(
    registry: LocaleDataRegistry,
    data_dir: Path,
    locales: list[str] | None = None,
) -> list[str]:
    """Register generated JSON tables from *data_dir* in the given order.

    All ``*.json`` files are loaded in sorted order when *locales* is omitted.
    Returns the locales that were registered.
    """
    if locales is None:
        locales = sorted(p.stem for p in data_dir.glob("*.json"))

    for locale in locales:
        registry.add_locale_data(locale, read_locale_data(data_dir / f"{locale}.json"))

    logger.info("locale_data_loaded", source=str(data_dir), locales=locales)
    return locales


def load_babel_locale_data(registry: LocaleDataRegistry, locales: list[str]) -> list[str]:
    """Extract compact tables from Babel for *locales* and register them in order."""
    for locale in locales:
        data = extract_locale_data(locale, babel_numbers_tree(locale))
        registry.add_locale_data(locale, data)

    logger.info("locale_data_loaded", source="babel", locales=locales)
    return locales


def bootstrap_registry(settings: Settings | None = None) -> LocaleDataRegistry:
    """Create a registry populated according to *settings*.

    Tables come from ``settings.locale_data_dir`` when set and from Babel
    otherwise. ``settings.default_locale`` overrides the first-registered
    default and ``settings.locale_matcher`` becomes the registry's matcher.
    """
    settings = settings or Settings()
    registry = LocaleDataRegistry(locale_matcher=settings.locale_matcher)

    if settings.locale_data_dir is not None:
        load_locale_data_dir(registry, settings.locale_data_dir, settings.preload_locales or None)
    else:
        load_babel_locale_data(registry, settings.preload_locales)

    if settings.default_locale:
        registry.set_default_locale(settings.default_locale)
    return registry
