import sys
import os

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import (
    MAX_UNITS,
    ZERO,
    Amount,
    AmountOverflowError,
    AmountParseError,
    AmountUnderflowError,
    MalformedAmountError,
    TooManyDecimalPlacesError,
)


class TestParse:
    def test_whole(self):
        assert Amount.parse("69").units == 690000
        assert Amount.parse("23435643524").units == 234356435240000

    def test_decimal(self):
        assert Amount.parse("1234.1").units == 12341000
        assert Amount.parse("2432.82").units == 24328200
        assert Amount.parse("123213.123").units == 1232131230
        assert Amount.parse("32435532.2435").units == 324355322435

    def test_leading_zeros(self):
        assert Amount.parse("0.0001").units == 1
        assert Amount.parse("007.5").units == 75000

    def test_too_many_decimal_places(self):
        with pytest.raises(TooManyDecimalPlacesError):
            Amount.parse("1234.56789")

    @pytest.mark.parametrize("text", [".134", "a123", "0x123", "", "1.", "-1", "+1", "1e3", "1 000", "1,5"])
    def test_malformed(self, text):
        with pytest.raises(MalformedAmountError):
            Amount.parse(text)

    def test_double_point_is_rejected(self):
        with pytest.raises(AmountParseError):
            Amount.parse("1.23.134")

    def test_parse_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Amount.parse("abc")

    def test_largest_representable(self):
        text = f"{MAX_UNITS // 10000}.{MAX_UNITS % 10000:04d}"
        assert Amount.parse(text).units == MAX_UNITS

    def test_whole_part_overflow(self):
        with pytest.raises(AmountOverflowError):
            Amount.parse(str(MAX_UNITS // 10000 + 1))

    def test_many_leading_zeros(self):
        assert Amount.parse("0" * 5000 + "1") == Amount(10000)
        assert Amount.parse("0" * 5000 + ".5") == Amount(5000)

    def test_huge_whole_part_overflows(self):
        with pytest.raises(AmountOverflowError):
            Amount.parse("9" * 5000)
        with pytest.raises(AmountOverflowError):
            Amount.parse("1" + "0" * 20 + ".25")

    def test_whole_plus_fraction_overflow(self):
        with pytest.raises(AmountOverflowError):
            Amount.parse(f"{MAX_UNITS // 10000}.9999")


class TestFormat:
    @pytest.mark.parametrize("units, text", [
        (12345, "1.2345"),
        (12000, "1.2000"),
        (69, "0.0069"),
        (690, "0.0690"),
        (100234, "10.0234"),
        (10000, "1.0000"),
        (0, "0.0000"),
    ])
    def test_display(self, units, text):
        assert str(Amount(units)) == text

    def test_repr(self):
        assert repr(Amount(69)) == "Amount('0.0069')"


class TestArithmetic:
    def test_add(self):
        assert Amount(8) + Amount(7) == Amount(15)

    def test_sub(self):
        assert Amount(8) - Amount(7) == Amount(1)

    def test_add_overflow(self):
        with pytest.raises(AmountOverflowError):
            Amount(MAX_UNITS) + Amount(1)

    def test_sub_underflow(self):
        with pytest.raises(AmountUnderflowError):
            ZERO - Amount(1)

    def test_construction_out_of_range(self):
        with pytest.raises(AmountOverflowError):
            Amount(MAX_UNITS + 1)
        with pytest.raises(AmountUnderflowError):
            Amount(-1)

    def test_ordering(self):
        assert Amount(1) < Amount(2)
        assert max(Amount(3), Amount(9), Amount(4)) == Amount(9)

    def test_adding_non_amount_is_unsupported(self):
        with pytest.raises(TypeError):
            Amount(1) + 1


class TestAmountProperties:
    """Property-based checks for parsing and checked arithmetic."""

    @given(
        st.integers(min_value=0, max_value=10 ** 12),
        st.text(alphabet="0123456789", min_size=0, max_size=4),
    )
    @settings(max_examples=200)
    def test_round_trip_is_canonical(self, whole, fraction):
        """
        PROPERTY: format(parse(text)) is text padded to 4 fractional digits.
        """
        text = f"{whole}.{fraction}" if fraction else str(whole)
        assert str(Amount.parse(text)) == f"{whole}.{fraction.ljust(4, '0')}"

    @given(
        st.integers(min_value=0, max_value=10 ** 6),
        st.text(alphabet="0123456789", min_size=5, max_size=12),
    )
    def test_too_many_decimal_places_always_fails(self, whole, fraction):
        with pytest.raises(TooManyDecimalPlacesError):
            Amount.parse(f"{whole}.{fraction}")

    @given(st.text(alphabet="abcxyz-+eE ,_", min_size=1, max_size=8))
    def test_non_numeric_always_fails(self, text):
        with pytest.raises(AmountParseError):
            Amount.parse(text)

    @given(
        st.integers(min_value=0, max_value=MAX_UNITS),
        st.integers(min_value=0, max_value=MAX_UNITS),
    )
    def test_add_never_wraps(self, a, b):
        if a + b > MAX_UNITS:
            with pytest.raises(AmountOverflowError):
                Amount(a) + Amount(b)
        else:
            assert (Amount(a) + Amount(b)).units == a + b

    @given(
        st.integers(min_value=0, max_value=MAX_UNITS),
        st.integers(min_value=0, max_value=MAX_UNITS),
    )
    def test_sub_never_wraps(self, a, b):
        if b > a:
            with pytest.raises(AmountUnderflowError):
                Amount(a) - Amount(b)
        else:
            assert (Amount(a) - Amount(b)).units == a - b
