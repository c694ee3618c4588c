"""Library configuration via environment variables with COMPACT_NUMBERS_ prefix."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Compact number formatting configuration.

    All settings are read from environment variables prefixed with
    ``COMPACT_NUMBERS_``. List values are given as JSON, e.g.
    ``COMPACT_NUMBERS_PRELOAD_LOCALES='["en", "uk"]'``.
    """

    model_config = SettingsConfigDict(env_prefix="COMPACT_NUMBERS_")

    # ── Locale data ────────────────────────────────────────────────────────
    # Directory of generated <locale>.json tables; Babel data is used when unset
    locale_data_dir: Path | None = None
    # Registration order; the first locale becomes the default
    preload_locales: list[str] = Field(default=["en"])
    default_locale: str | None = None

    # ── Negotiation ────────────────────────────────────────────────────────
    locale_matcher: Literal["best fit", "lookup"] = "best fit"

    # ── Generator ──────────────────────────────────────────────────────────
    # Root of an unpacked cldr-numbers-modern/main directory
    cldr_source_dir: Path | None = None
    output_dir: Path = Path("./locale-data")

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
