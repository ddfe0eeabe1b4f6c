"""
Test suite for currency module

Tests cent quantization, formatting and keyboard input parsing.
All amounts must stay Decimal with two decimal places.
"""

import pytest
from decimal import Decimal

from atm_simulator.currency import (
    to_amount, format_amount, decimal_from_string, add_amounts, subtract_amounts,
    CENT, ZERO
)


class TestToAmount:
    """Test conversion of raw values to cent amounts"""

    def test_decimal_is_quantized(self):
        """Test Decimal input is rounded to two places"""
        assert to_amount(Decimal('100')) == Decimal('100.00')
        assert to_amount(Decimal('100')).as_tuple().exponent == -2
        assert to_amount(Decimal('100.555')) == Decimal('100.56')  # Half up
        assert to_amount(Decimal('100.554')) == Decimal('100.55')

    def test_int_float_and_string(self):
        """Test other numeric inputs convert through their string form"""
        assert to_amount(500) == Decimal('500.00')
        assert to_amount(0.1) == Decimal('0.10')
        assert to_amount("1200.5") == Decimal('1200.50')
        assert to_amount(" 42 ") == Decimal('42.00')

    def test_negative_and_zero_pass_through(self):
        """Test sign is preserved; positivity is the caller's rule"""
        assert to_amount("-3") == Decimal('-3.00')
        assert to_amount(0) == ZERO

    def test_rejects_non_numbers(self):
        """Test garbage, NaN, infinity and booleans are refused"""
        for bad in ["abc", "", "NaN", "Infinity", float('nan'), float('inf'), None, True]:
            with pytest.raises(ValueError):
                to_amount(bad)

    def test_cent_constant(self):
        """Test the cent step"""
        assert CENT == Decimal('0.01')


class TestFormatAmount:
    """Test two-decimal formatting used on screen and on disk"""

    def test_format(self):
        assert format_amount(Decimal('1500')) == "1500.00"
        assert format_amount(Decimal('0.5')) == "0.50"
        assert format_amount(Decimal('12345678.129')) == "12345678.13"

    def test_no_thousands_separator(self):
        """Test amounts stay a single whitespace-free token"""
        assert "," not in format_amount(Decimal('1000000'))


class TestDecimalFromString:
    """Test tolerant parsing of typed amounts"""

    def test_plain_numbers(self):
        assert decimal_from_string("500") == Decimal('500')
        assert decimal_from_string("12.75") == Decimal('12.75')
        assert decimal_from_string("-20") == Decimal('-20')

    def test_currency_symbols_and_separators(self):
        """Test symbols are stripped and separators interpreted"""
        assert decimal_from_string("$1,250.50") == Decimal('1250.50')
        assert decimal_from_string("1,250") == Decimal('1250')
        assert decimal_from_string("12,50") == Decimal('12.50')

    def test_invalid_input(self):
        """Test unusable input raises ValueError"""
        with pytest.raises(ValueError, match="non-empty string"):
            decimal_from_string("")
        with pytest.raises(ValueError, match="Cannot convert"):
            decimal_from_string("abc")
        with pytest.raises(ValueError, match="Cannot convert"):
            decimal_from_string("1.2.3")

    def test_exponent_notation(self):
        """Test exponents are honored, not stripped"""
        assert decimal_from_string("1e5") == Decimal('100000')
        assert decimal_from_string("2.5E-1") == Decimal('0.25')

    def test_embedded_garbage_rejected(self):
        """Test letters inside a number are refused instead of dropped"""
        for bad in ["12abc34", "1$2", "5 5", "1,2345", "1,234,56", "--5", "e5", "-", "$"]:
            with pytest.raises(ValueError, match="Cannot convert"):
                decimal_from_string(bad)

    def test_currency_symbol_and_sign(self):
        assert decimal_from_string("$-5") == Decimal('-5')
        assert decimal_from_string("-$5") == Decimal('-5')
        assert decimal_from_string("€12,50") == Decimal('12.50')


class TestLargeAmounts:
    """Test amounts beyond the 28-digit default context"""

    def test_quantize_wide_values(self):
        """Test rounding keeps every digit of very large values"""
        assert to_amount(Decimal('1e27')) == Decimal('1' + '0' * 27 + '.00')
        assert to_amount("1e40") == Decimal('1e40')
        assert to_amount("1" * 30) == Decimal("1" * 30)
        assert to_amount("123456789012345678901234567890.125") == Decimal(
            '123456789012345678901234567890.13'
        )

    def test_format_wide_values(self):
        """Test large amounts print in plain notation"""
        assert format_amount(Decimal('1e27')) == "1" + "0" * 27 + ".00"

    def test_exact_arithmetic(self):
        """Test sums and differences never round at large magnitudes"""
        big = to_amount("9" * 35)
        cent = Decimal('0.01')

        assert add_amounts(big, cent) == Decimal("9" * 35 + ".01")
        assert subtract_amounts(add_amounts(big, cent), big) == cent
        assert add_amounts(big, big) == Decimal("1" + "9" * 34 + "8.00")

    def test_beyond_exponent_limit(self):
        """Test values the context cannot represent raise ValueError"""
        with pytest.raises(ValueError):
            to_amount(Decimal('1e1000000'))
