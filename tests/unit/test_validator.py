"""Unit tests for field-level record validation."""

from datetime import date

from extraction.processors.validator import is_number, validate_extracted_data

REQUIRED = ["client_number", "reference_month"]
NUMERIC = ["electricity_quantity", "electricity_value"]

VALID_RECORD = {
    "client_number": "7204076116",
    "reference_month": date(2024, 1, 1),
    "electricity_quantity": 50,
    "electricity_value": 47.75,
}


class TestValidateExtractedData:
    """Tests for validate_extracted_data."""

    def test_valid_record(self):
        """Test a complete record is accepted and returned."""
        result = validate_extracted_data(VALID_RECORD, REQUIRED, NUMERIC)
        assert result.is_valid is True
        assert result.errors == []
        assert result.data == VALID_RECORD

    def test_missing_client_number(self):
        """Test a missing required field rejects the whole record."""
        record = {k: v for k, v in VALID_RECORD.items() if k != "client_number"}
        result = validate_extracted_data(record, REQUIRED, NUMERIC)

        assert result.is_valid is False
        assert result.data is None
        assert result.errors == [
            {
                "code": "INVALID_CLIENT_NUMBER",
                "message": "client_number inválido",
                "field": "client_number",
            }
        ]

    def test_empty_string_counts_as_missing(self):
        """Test falsy required values are rejected."""
        record = {**VALID_RECORD, "client_number": ""}
        result = validate_extracted_data(record, REQUIRED, NUMERIC)
        assert [e["field"] for e in result.errors] == ["client_number"]

    def test_non_numeric_value(self):
        """Test a string in a numeric field is rejected."""
        record = {**VALID_RECORD, "electricity_value": "47,75"}
        result = validate_extracted_data(record, REQUIRED, NUMERIC)
        assert [e["code"] for e in result.errors] == ["INVALID_ELECTRICITY_VALUE"]

    def test_all_errors_reported(self):
        """Test every failing field produces its own error."""
        result = validate_extracted_data({}, REQUIRED, NUMERIC)
        assert len(result.errors) == 4
        assert [e["message"] for e in result.errors] == [
            f"{name} inválido" for name in REQUIRED + NUMERIC
        ]

    def test_zero_is_a_valid_number(self):
        """Test zero passes the numeric check."""
        record = {**VALID_RECORD, "electricity_quantity": 0}
        assert validate_extracted_data(record, REQUIRED, NUMERIC).is_valid is True


class TestIsNumber:
    """Tests for the numeric type check."""

    def test_int_and_float(self):
        assert is_number(1) is True
        assert is_number(-225.42) is True

    def test_nan_rejected(self):
        assert is_number(float("nan")) is False

    def test_bool_rejected(self):
        """Test bools are not treated as numbers."""
        assert is_number(True) is False

    def test_none_and_strings_rejected(self):
        assert is_number(None) is False
        assert is_number("1") is False
