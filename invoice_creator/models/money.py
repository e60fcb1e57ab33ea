"""Decimal helpers for money and quantity text"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENTS = Decimal("0.01")


def decimal_to_wire(d: Optional[Decimal]) -> Optional[str]:
    """
    Convert Decimal to a plain string without scientific notation or
    trailing zeros.
    
    Examples:
        >>> decimal_to_wire(Decimal("2.50"))
        "2.5"
        >>> decimal_to_wire(Decimal("1E+2"))
        "100"
    """
    if d is None:
        return None
    s = format(d, 'f')
    if '.' in s:
        s = s.rstrip('0').rstrip('.')
    return s if s not in ('', '-0') else '0'


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents, half up; zero is never signed"""
    rounded = Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    return rounded.copy_abs() if rounded.is_zero() else rounded


def format_money(amount: Decimal) -> str:
    """Two-decimal text, e.g. Decimal('4') -> '4.00'"""
    return f"{quantize_money(amount):f}"
