"""Shared test fixtures."""
import pytest
from compact_numbers.cldr.loader import load_babel_locale_data
from compact_numbers.config import Settings
from compact_numbers.formatting.context import IntlContext
from compact_numbers.formatting.number_format import NumberFormatFactory
from compact_numbers.locales.registry import LocaleDataRegistry

# Registration order matters: the first locale becomes the default
TEST_LOCALES = ["en", "uk", "de", "ar", "ja"]


class RecordingErrors:
    """``on_error`` callback that keeps every reported error."""

    def __init__(self):
        self.errors = []

    def __call__(self, error):
        self.errors.append(error)

    @property
    def codes(self):
        return [str(e.code) for e in self.errors]


@pytest.fixture
def mock_settings(tmp_path):
    """Create test settings that never touch the working directory."""
    return Settings(preload_locales=TEST_LOCALES, output_dir=tmp_path / "locale-data")


@pytest.fixture
def registry():
    reg = LocaleDataRegistry()
    load_babel_locale_data(reg, TEST_LOCALES)
    return reg


@pytest.fixture
def on_error():
    return RecordingErrors()


@pytest.fixture
def number_format_factory(registry):
    return NumberFormatFactory(registry)


@pytest.fixture
def make_context(registry, on_error):
    """Build an ``IntlContext`` for a locale, sharing the test registry."""

    def _make(locale="en", formats=None):
        return IntlContext(locale=locale, registry=registry, on_error=on_error, formats=formats or {})

    return _make
