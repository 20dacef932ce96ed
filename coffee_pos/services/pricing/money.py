"""Money coercion helpers shared by every pricing formula."""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWOPLACES = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """coerce anything numeric-looking to a finite Decimal; junk becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return ZERO
        return Decimal(str(value))

    text = str(value).strip()
    if not text:
        return ZERO
    try:
        parsed = Decimal(text)
    except (InvalidOperation, ValueError):
        return ZERO
    return parsed if parsed.is_finite() else ZERO


def to_quantity(value: Any) -> int:
    """whole units, truncated toward zero; junk becomes 0.

    Fractions below one truncate to 0, so "0.5" reads as a removal when
    fed to CartStore.update_item_quantity.
    """
    return int(to_decimal(value))


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(high, value))


def quantize_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
