"""
Decimal precision and rounding for Daybook.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

ZERO = Decimal("0")


class RoundingPolicy(Enum):
    """Rounding policies for monetary calculations."""

    BANKERS = ROUND_HALF_EVEN
    HALF_UP = ROUND_HALF_UP


# Every rounded amount in the engine goes through this policy.
DEFAULT_ROUNDING = RoundingPolicy.BANKERS
DEFAULT_DECIMALS = 2


def quantize(
    amount: Decimal,
    decimals: int = DEFAULT_DECIMALS,
    rounding: RoundingPolicy = DEFAULT_ROUNDING,
) -> Decimal:
    """Quantize amount to the given number of decimal places."""
    quantum = Decimal("1").scaleb(-decimals)  # e.g., 0.01 for 2 dp
    return amount.quantize(quantum, rounding=rounding.value)


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a configured number into an exact Decimal.

    Floats go through ``str`` first so that ``10000.01`` becomes
    ``Decimal("10000.01")`` rather than its binary expansion.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got boolean {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"expected a finite number, got {value!r}")
        result = Decimal(str(value))
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"not a decimal number: {value!r}") from exc
    else:
        raise ValueError(f"expected a number, got {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"expected a finite number, got {value!r}")
    return result


def format_amount(value: Decimal, symbol: str = "") -> str:
    """
    Render an amount with its display symbol and exactly 2 decimal places.

    The sign goes before the symbol: ``-£1,234.50``.
    """
    q = quantize(value)
    sign = "-" if q < 0 else ""
    return f"{sign}{symbol}{abs(q):,.2f}"
