"""Unit tests for input sanitization and validation"""

import pytest
from decimal import Decimal

from invoice_creator.validation.input_rules import (
    sanitize_input,
    validate_email,
    validate_phone,
    parse_numeric,
    validate_numeric,
    QUANTITY_MIN,
    QUANTITY_MAX,
)


@pytest.mark.unit
class TestSanitizeInput:
    """Test sanitize_input"""
    
    def test_strips_markup_characters(self):
        assert sanitize_input('<b>"Brake" job\'s</b>') == "bBrake jobs/b"
    
    def test_trims_whitespace(self):
        assert sanitize_input("  Jane Doe  ") == "Jane Doe"
    
    def test_caps_length(self):
        assert sanitize_input("x" * 600) == "x" * 500
        assert sanitize_input("x" * 150, 100) == "x" * 100
    
    def test_non_strings_pass_through(self):
        assert sanitize_input(42) == 42
        assert sanitize_input(None) is None


@pytest.mark.unit
class TestValidators:
    """Test email, phone and numeric validators"""
    
    @pytest.mark.parametrize("email", ["jane@example.com", "a.b@c.co"])
    def test_valid_emails(self, email):
        assert validate_email(email)
    
    @pytest.mark.parametrize("email", ["", "not-an-email", "jane@example", "ja ne@example.com"])
    def test_invalid_emails(self, email):
        assert not validate_email(email)
    
    @pytest.mark.parametrize("phone", ["555-123-4567", "(555) 123-4567", "15551234567", "123456789012345"])
    def test_valid_phones(self, phone):
        assert validate_phone(phone)
    
    @pytest.mark.parametrize("phone", ["", "555-1234", "1234567890123456", "555-CALL-NOW"])
    def test_invalid_phones(self, phone):
        assert not validate_phone(phone)
    
    def test_parse_numeric(self):
        assert parse_numeric("12.50") == Decimal("12.50")
        assert parse_numeric(3) == Decimal("3")
        assert parse_numeric("abc") is None
        assert parse_numeric("NaN") is None
        assert parse_numeric("Infinity") is None
        assert parse_numeric(True) is None
        assert str(parse_numeric("-0")) == "0"
        assert not parse_numeric("-0.00").is_signed()
    
    def test_validate_numeric_range(self):
        assert validate_numeric("999", QUANTITY_MIN, QUANTITY_MAX)
        assert validate_numeric("0", QUANTITY_MIN, QUANTITY_MAX)
        assert not validate_numeric("1500", QUANTITY_MIN, QUANTITY_MAX)
        assert not validate_numeric("-1", QUANTITY_MIN, QUANTITY_MAX)
        assert not validate_numeric("", QUANTITY_MIN, QUANTITY_MAX)
