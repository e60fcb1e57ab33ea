"""Input sanitization and validation"""

from .input_rules import (
    sanitize_input,
    validate_email,
    validate_phone,
    validate_numeric,
    parse_numeric,
)

__all__ = [
    "sanitize_input",
    "validate_email",
    "validate_phone",
    "validate_numeric",
    "parse_numeric",
]
