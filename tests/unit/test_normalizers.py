"""Unit tests for pt-BR number and month normalization."""

from datetime import date

from extraction.utils.normalizers import (
    normalize_month,
    normalize_whitespace,
    parse_decimal,
    parse_month_year,
)


class TestParseDecimal:
    """Tests for parse_decimal."""

    def test_thousands_and_decimal_comma(self):
        """Test thousands dots are dropped and the comma becomes the decimal point."""
        assert parse_decimal("1.234,56") == 1234.56

    def test_plain_decimal_comma(self):
        """Test a value without thousands separator."""
        assert parse_decimal("47,75") == 47.75

    def test_integer(self):
        """Test integer quantities parse to whole floats."""
        assert parse_decimal("456") == 456.0

    def test_negative(self):
        """Test a leading minus is kept."""
        assert parse_decimal("-225,42") == -225.42

    def test_malformed_returns_zero(self):
        """Test malformed input yields 0 instead of raising."""
        assert parse_decimal("abc") == 0.0

    def test_none_returns_zero(self):
        """Test non-string input yields 0 instead of raising."""
        assert parse_decimal(None) == 0.0


class TestParseMonthYear:
    """Tests for parse_month_year."""

    def test_three_letter_month(self):
        """Test JAN/2024 maps to the first day of January 2024."""
        assert parse_month_year("JAN", "2024") == date(2024, 1, 1)

    def test_lowercase_month(self):
        """Test month tokens are case-insensitive."""
        assert parse_month_year("dez", "2023") == date(2023, 12, 1)

    def test_full_month_name(self):
        """Test full Portuguese month names."""
        assert parse_month_year("SETEMBRO", "2024") == date(2024, 9, 1)

    def test_marco_with_and_without_cedilla(self):
        """Test MARÇO is recognized with and without the cedilla."""
        assert parse_month_year("MARÇO", "2024") == date(2024, 3, 1)
        assert parse_month_year("março", "2024") == date(2024, 3, 1)
        assert parse_month_year("MARCO", "2024") == date(2024, 3, 1)

    def test_unknown_month(self):
        """Test an unknown month token returns None."""
        assert parse_month_year("XYZ", "2024") is None

    def test_non_numeric_year(self):
        """Test a non-integer year returns None."""
        assert parse_month_year("JAN", "20X4") is None

    def test_text_extraction_glitch(self):
        """Test common misreadings are normalized before lookup."""
        assert parse_month_year("MA1", "2024") == date(2024, 5, 1)
        assert parse_month_year("N0V", "2024") == date(2024, 11, 1)


class TestNormalizeHelpers:
    """Tests for whitespace and month-token normalization."""

    def test_collapses_all_whitespace(self):
        """Test newlines, tabs and runs of spaces collapse to one space."""
        assert normalize_whitespace("  Energia\n\tElétrica   kWh \r\n 50 ") == "Energia Elétrica kWh 50"

    def test_normalize_month_uppercases(self):
        """Test tokens are stripped and uppercased."""
        assert normalize_month(" fev ") == "FEV"
