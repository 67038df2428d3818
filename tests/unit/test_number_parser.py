# ============================================================================
# FILE: tests/unit/test_number_parser.py
# ============================================================================
"""
Unit tests for locale-aware number parsing
"""

import math

import pytest

from biomarker_ingestion.parsing import parse_locale_number, is_valid_number


def test_parse_numeric_values_pass_through():
    """Test ints and floats are returned unchanged"""
    assert parse_locale_number(184.0) == 184.0
    assert parse_locale_number(92) == 92.0
    assert isinstance(parse_locale_number(92), float)


def test_parse_comma_decimal():
    """Test Polish decimal comma"""
    assert parse_locale_number("184,0") == 184.0
    assert parse_locale_number("4,50") == 4.5


def test_parse_dot_decimal():
    """Test dot decimal"""
    assert parse_locale_number("5.90") == 5.9


@pytest.mark.parametrize("raw,expected", [
    ("5.4 %", 5.4),
    ("  12,5 mg/dl", 12.5),
    ("-3", -3.0),
    ("1e3", 1000.0),
])
def test_parse_leading_numeric_prefix(raw, expected):
    """Test trailing text after the number is ignored"""
    assert parse_locale_number(raw) == expected


def test_parse_only_first_comma_replaced():
    """Test thousands-style strings keep the first comma as decimal point"""
    assert parse_locale_number("1,234,5") == 1.234


@pytest.mark.parametrize("raw", ["", "abc", "mg 5", None, [], {}, True, False])
def test_parse_non_numbers_return_nan(raw):
    """Test unparsable input yields NaN instead of raising"""
    assert math.isnan(parse_locale_number(raw))


def test_is_valid_number():
    """Test finiteness check"""
    assert is_valid_number(1.0)
    assert not is_valid_number(math.nan)
    assert not is_valid_number(math.inf)
    assert not is_valid_number(-math.inf)


def test_parse_integers_beyond_float_range():
    """Test oversized JSON integers become infinite instead of raising"""
    assert parse_locale_number(10 ** 400) == math.inf
    assert parse_locale_number(-(10 ** 400)) == -math.inf
    assert not is_valid_number(parse_locale_number(10 ** 400))
