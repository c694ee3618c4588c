"""Test the message formatting helpers."""
import pytest
from compact_numbers.cldr.loader import load_babel_locale_data
from compact_numbers.errors import ErrorCode
from compact_numbers.formatting.compact_number import CompactNumber
from compact_numbers.formatting.context import IntlContext
from compact_numbers.formatting.message import (
    create_formatter,
    normalize,
    select_plural_category,
    wrap_format_message,
)
from compact_numbers.formatting.number_format import NumberFormatFactory
from compact_numbers.locales.registry import LocaleDataRegistry


class Bold:
    """Stand-in for a rich (non-text) message element."""

    def __init__(self, children):
        self.children = children


class TestCreateFormatter:
    def test_formats_in_context_locale(self, make_context, on_error):
        fmt = create_formatter(make_context("uk"))
        cn = fmt(1256, {"maximum_fraction_digits": 1})
        assert isinstance(cn, CompactNumber)
        assert cn.to_number() == 1300
        assert on_error.errors == []

    def test_unsupported_locale_reports_once(self, make_context, on_error):
        fmt = create_formatter(make_context("xx"))
        assert fmt(1456).to_string() == "1.5K"
        assert fmt(14567, {"maximum_fraction_digits": 1}).to_string() == "14.6K"
        assert on_error.codes == [ErrorCode.MISSING_DATA]
        assert '"xx"' in on_error.errors[0].message

    def test_sole_english_registry(self, on_error):
        registry = LocaleDataRegistry()
        load_babel_locale_data(registry, ["en"])
        context = IntlContext(locale="fr-CA", registry=registry, on_error=on_error)
        cn = create_formatter(context)(14567, {"maximum_fraction_digits": 1})
        assert cn.to_string() == "14.6K"
        assert cn.to_number() == 14600
        assert len(on_error.errors) == 1

    def test_custom_number_format_factory(self, make_context, number_format_factory):
        fmt = create_formatter(make_context("en"), number_format_factory)
        fmt(1500).to_string()
        assert len(number_format_factory._cache) == 1

    def test_factory_on_other_registry_rejected(self, make_context):
        with pytest.raises(ValueError, match="different registry"):
            create_formatter(make_context("en"), NumberFormatFactory(LocaleDataRegistry()))


class TestNormalize:
    def test_single_string(self):
        assert normalize("hello") == "hello"

    def test_compact_number_becomes_string(self, make_context):
        cn = create_formatter(make_context("en"))(1500)
        assert normalize(cn) == "1.5K"

    def test_text_only_list_is_joined(self, make_context):
        fmt = create_formatter(make_context("en"))
        assert normalize(["You have ", fmt(1500), " followers"]) == "You have 1.5K followers"

    def test_nested_lists_are_flattened(self, make_context):
        fmt = create_formatter(make_context("en"))
        assert normalize(["a", ["b", [fmt(2000000)]], "c"]) == "ab2Mc"

    def test_rich_elements_are_kept(self, make_context):
        fmt = create_formatter(make_context("en"))
        bold = Bold(["x"])
        assert normalize(["Total: ", [bold, fmt(1500)]]) == ["Total: ", bold, "1.5K"]

    def test_other_values_become_text(self):
        assert normalize(42) == "42"

    def test_empty_list(self):
        assert normalize([]) == ""


class TestWrapFormatMessage:
    def test_output_is_normalized(self, make_context):
        fmt = create_formatter(make_context("en"))

        def format_message(template, values):
            return [template, values["count"]]

        wrapped = wrap_format_message(format_message)
        assert wrapped("Followers: ", {"count": fmt(1456)}) == "Followers: 1.5K"
        assert wrapped.__name__ == "format_message"


class TestSelectPluralCategory:
    def test_uses_rounded_value(self, make_context):
        cn = create_formatter(make_context("uk"))(1256, {"maximum_fraction_digits": 1})
        assert select_plural_category("uk", cn) == "many"

    def test_raw_numbers(self):
        assert select_plural_category("en", 1) == "one"
        assert select_plural_category("en", 1.0) == "one"
        assert select_plural_category("en", 2) == "other"
        assert select_plural_category("uk", 21) == "one"

    def test_rounding_changes_category(self, make_context):
        cn = create_formatter(make_context("uk"))(1001)
        assert cn.to_number() == 1000
        assert select_plural_category("uk", cn) == "many"
        assert select_plural_category("uk", 1001) == "one"

    def test_non_finite_values_are_other(self):
        assert select_plural_category("en", float("inf")) == "other"
        assert select_plural_category("uk", float("-inf")) == "other"
        assert select_plural_category("en", float("nan")) == "other"

    def test_non_finite_compact_number(self, make_context, on_error):
        fmt = create_formatter(make_context("en"))
        assert select_plural_category("en", fmt(float("inf"))) == "other"
        assert select_plural_category("uk", fmt(float("nan"))) == "other"
        assert on_error.errors == []
