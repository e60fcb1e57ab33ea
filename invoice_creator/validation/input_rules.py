"""Sanitization and validation rules applied to every user-entered value"""

import re
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 500

# Field-specific caps (tighter than MAX_INPUT_LENGTH)
NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20
EMAIL_MAX_LENGTH = 100
NUMBER_MAX_LENGTH = 20
DESCRIPTION_MAX_LENGTH = 200

QUANTITY_MIN = Decimal("0")
QUANTITY_MAX = Decimal("999")
PRICE_MIN = Decimal("0")
PRICE_MAX = Decimal("999999")

_DISALLOWED_CHARS = re.compile(r"[<>\"']")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_SEPARATORS = re.compile(r"[\s\-()]")
_PHONE_DIGITS = re.compile(r"^\d{10,15}$")


def sanitize_input(value: Any, max_length: int = MAX_INPUT_LENGTH) -> Any:
    """
    Strip disallowed characters, trim whitespace and cap length.
    
    Non-string values pass through untouched.
    
    Args:
        value: Raw user input
        max_length: Length cap applied after stripping (never above 500)
        
    Returns:
        Sanitized string, or the original non-string value
    """
    if not isinstance(value, str):
        return value
    cleaned = _DISALLOWED_CHARS.sub("", value).strip()
    return cleaned[:min(max_length, MAX_INPUT_LENGTH)]


def validate_email(email: Optional[str]) -> bool:
    """Single '@' with a local part and a dotted domain"""
    if not email:
        return False
    return bool(_EMAIL_RE.match(email))


def validate_phone(phone: Optional[str]) -> bool:
    """10-15 digits once separators (- ( ) and spaces) are removed"""
    if not phone:
        return False
    return bool(_PHONE_DIGITS.match(_PHONE_SEPARATORS.sub("", phone)))


def parse_numeric(value: Any) -> Optional[Decimal]:
    """
    Parse a user-entered number to Decimal.
    
    Returns None for anything that is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        # Always go through str to avoid float artefacts
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not number.is_finite():
        return None
    if number.is_zero():
        # "-0" would otherwise carry its sign into totals
        return number.copy_abs()
    return number


def validate_numeric(
    value: Any,
    min_value: Decimal = PRICE_MIN,
    max_value: Decimal = PRICE_MAX
) -> bool:
    """Finite number within [min_value, max_value]"""
    number = parse_numeric(value)
    if number is None:
        return False
    return Decimal(str(min_value)) <= number <= Decimal(str(max_value))
