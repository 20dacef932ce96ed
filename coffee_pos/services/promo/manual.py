import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from coffee_pos.schemas.cart import ManualDiscount
from coffee_pos.services.cart.exceptions import InvalidDiscountError
from coffee_pos.services.pricing.money import HUNDRED, ZERO, clamp, to_decimal

logger = logging.getLogger(__name__)

DISCOUNT_TYPES = ("percent", "amount")


def _parse_raw_value(raw: Any) -> Decimal:
    if raw is None or isinstance(raw, bool):
        raise InvalidDiscountError("Discount value is required")
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise InvalidDiscountError("Discount value is required")
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise InvalidDiscountError(f"Discount value is not a number: {raw!r}")
    elif isinstance(raw, (int, float, Decimal)):
        value = Decimal(str(raw)) if isinstance(raw, float) else Decimal(raw)
    else:
        raise InvalidDiscountError(f"Discount value is not a number: {raw!r}")

    if not value.is_finite():
        raise InvalidDiscountError("Discount value must be a finite number")
    if value < ZERO:
        raise InvalidDiscountError("Discount value cannot be negative")
    return value


def parse_manual_discount(discount_type: str, raw_value: Any) -> ManualDiscount:
    """Turn cashier input into a ManualDiscount.

    Clearly invalid input (blank, non-numeric, non-finite, negative) is
    rejected. A percent above 100 is clamped to 100. Fixed amounts are
    kept as entered and capped against the cart when evaluated.
    """
    if discount_type not in DISCOUNT_TYPES:
        raise InvalidDiscountError(f"Unknown discount type: {discount_type!r}")

    value = _parse_raw_value(raw_value)
    if discount_type == "percent" and value > HUNDRED:
        logger.warning("percent discount %s clamped to 100", value)
        value = HUNDRED
    return ManualDiscount(type=discount_type, value=value)


def manual_discount_amount(discount: Optional[ManualDiscount], base: Decimal) -> Decimal:
    """manual discount against the post-promotion amount, never negative or above it."""
    if discount is None:
        return ZERO

    base = max(to_decimal(base), ZERO)
    value = max(to_decimal(discount.value), ZERO)
    if discount.type == "percent":
        amount = base * (clamp(value, ZERO, HUNDRED) / HUNDRED)
    else:
        amount = min(value, base)
    return max(amount, ZERO)
