"""Test locale tag parsing, likely subtags and matching."""
import pytest
from compact_numbers.errors import InvalidLocaleError
from compact_numbers.locales.tags import (
    best_fit_match,
    canonicalize_locale_list,
    lookup_match,
    maximize,
    minimize_locale,
    parse_tag,
)


class TestParseTag:
    def test_casing_is_canonical(self):
        assert str(parse_tag("EN-us")) == "en-US"

    def test_script_and_region(self):
        tag = parse_tag("zh_hant_tw")
        assert tag.core == ("zh", "Hant", "TW")

    def test_unicode_extension(self):
        tag = parse_tag("ar-EG-u-nu-latn")
        assert tag.base == "ar-EG"
        assert tag.keyword("nu") == "latn"
        assert str(tag) == "ar-EG-u-nu-latn"

    def test_other_extensions_dropped(self):
        assert str(parse_tag("en-x-private")) == "en"

    @pytest.mark.parametrize("bad", ["", "e", "en--US", "123", "en US", "toolonglanguage"])
    def test_invalid_raises(self, bad):
        with pytest.raises(InvalidLocaleError):
            parse_tag(bad)

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            parse_tag("!!")


class TestCanonicalizeLocaleList:
    def test_none_is_empty(self):
        assert canonicalize_locale_list(None) == []

    def test_single_string(self):
        assert canonicalize_locale_list("en_us") == ["en-US"]

    def test_deduplicates_in_order(self):
        assert canonicalize_locale_list(["uk", "en-us", "UK", "en-US"]) == ["uk", "en-US"]


class TestLikelySubtags:
    def test_maximize(self):
        assert maximize(parse_tag("en")).core == ("en", "Latn", "US")

    def test_minimize_full_tag(self):
        assert minimize_locale("en-Latn-US") == "en"

    def test_minimize_keeps_distinguishing_region(self):
        assert minimize_locale("en-GB") == "en-GB"

    def test_minimize_keeps_extension(self):
        assert minimize_locale("ja-JP-u-nu-latn") == "ja-u-nu-latn"

    def test_unknown_language_unchanged(self):
        assert minimize_locale("xx") == "xx"


class TestMatchers:
    available = {"en", "uk", "de", "ja"}

    def test_lookup_strips_subtags(self):
        assert lookup_match(self.available, ["de-CH"]) == ("de", "de-CH")

    def test_lookup_no_match(self):
        assert lookup_match(self.available, ["fr"]) is None

    def test_best_fit_exact(self):
        assert best_fit_match(self.available, ["uk"]) == ("uk", "uk")

    def test_best_fit_same_language_and_script(self):
        assert best_fit_match(self.available, ["en-Latn-AU"]) == ("en", "en-Latn-AU")

    def test_best_fit_prefers_requested_region(self):
        available = {"en", "en-GB"}
        assert best_fit_match(available, ["en-GB"]) == ("en-GB", "en-GB")

    def test_best_fit_first_requested_wins(self):
        assert best_fit_match(self.available, ["fr", "ja", "en"]) == ("ja", "ja")
