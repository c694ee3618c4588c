"""Test compact exponent selection."""
from decimal import Decimal

import pytest
from compact_numbers.formatting.exponent import (
    bucket_for_magnitude,
    compute_exponent,
    compute_exponent_for_magnitude,
    is_uncompacted,
    pattern_digits,
)
from compact_numbers.models.options import ResolvedNumberFormatOptions

OPTIONS = ResolvedNumberFormatOptions(
    locale="en",
    numbering_system="latn",
    notation="compact",
    rounding_type="morePrecision",
    minimum_significant_digits=1,
    maximum_significant_digits=2,
    minimum_fraction_digits=0,
    maximum_fraction_digits=0,
)

EN_SHORT = {
    "one": {"1000": "0K", "1000000": "0M"},
    "other": {
        "1000": "0K",
        "10000": "00K",
        "100000": "000K",
        "1000000": "0M",
        "10000000": "00M",
        "100000000": "000M",
        "1000000000": "0B",
    },
}

# ja style: nothing below 10^4, then 4-digit groups
JA_SHORT = {
    "other": {
        "1000": "0",
        "10000": "0万",
        "100000": "00万",
        "1000000": "000万",
        "10000000": "0000万",
        "100000000": "0億",
    },
}


class TestPatternHelpers:
    @pytest.mark.parametrize("pattern,digits", [("0K", 1), ("000K", 3), ("¤00M", 2), ("0 'k'", 1), ("K", 0)])
    def test_pattern_digits(self, pattern, digits):
        assert pattern_digits(pattern) == digits

    def test_uncompacted(self):
        assert is_uncompacted("0")
        assert not is_uncompacted("0K")


class TestBucketForMagnitude:
    def test_largest_breakpoint_not_above_value(self):
        assert bucket_for_magnitude(EN_SHORT, 3) == "1000"
        assert bucket_for_magnitude(EN_SHORT, 5) == "100000"

    def test_below_smallest_breakpoint(self):
        assert bucket_for_magnitude(EN_SHORT, 2) is None

    def test_above_largest_breakpoint(self):
        assert bucket_for_magnitude(EN_SHORT, 14) == "1000000000"

    def test_empty_table(self):
        assert bucket_for_magnitude({}, 3) is None
        assert bucket_for_magnitude(None, 3) is None


class TestComputeExponentForMagnitude:
    @pytest.mark.parametrize("mag,exponent", [(0, 0), (2, 0), (3, 3), (4, 3), (5, 3), (6, 6), (9, 9), (12, 9)])
    def test_en(self, mag, exponent):
        assert compute_exponent_for_magnitude(EN_SHORT, mag) == exponent

    @pytest.mark.parametrize("mag,exponent", [(3, 0), (4, 4), (7, 4), (8, 8)])
    def test_ja(self, mag, exponent):
        assert compute_exponent_for_magnitude(JA_SHORT, mag) == exponent


class TestComputeExponent:
    def test_simple(self):
        assert compute_exponent(EN_SHORT, OPTIONS, Decimal(1456)) == (3, 3)

    def test_zero(self):
        assert compute_exponent(EN_SHORT, OPTIONS, Decimal(0)) == (0, 0)

    def test_negative_uses_absolute_value(self):
        assert compute_exponent(EN_SHORT, OPTIONS, Decimal(-14567)) == (3, 4)

    def test_rounding_crosses_into_next_bucket(self):
        assert compute_exponent(EN_SHORT, OPTIONS, Decimal(999500)) == (6, 6)

    def test_rounding_below_first_bucket(self):
        assert compute_exponent(EN_SHORT, OPTIONS, Decimal("999.6")) == (3, 3)

    def test_no_table(self):
        assert compute_exponent(None, OPTIONS, Decimal(1456)) == (0, 3)
