"""Per-line pricing.

A line's unit price is its snapshotted list price plus the size and
extra-shot modifiers; the product-level percent discount then comes off
that unit price. Everything here is a pure function of the line item.
"""

from decimal import Decimal
from typing import Iterable

from .money import HUNDRED, ZERO, clamp, to_decimal


def _modifier(selection) -> Decimal:
    if selection is None:
        return ZERO
    return to_decimal(getattr(selection, "price_modifier", None))


def unit_price(item) -> Decimal:
    """list price + size modifier + extra shot modifier, before any discount."""
    return to_decimal(item.base_price) + _modifier(item.size) + _modifier(item.extra_shot)


def product_discount_percent(item) -> Decimal:
    return clamp(to_decimal(item.discount), ZERO, HUNDRED)


def discounted_unit_price(item) -> Decimal:
    return unit_price(item) * (1 - product_discount_percent(item) / HUNDRED)


def line_total(item) -> Decimal:
    return discounted_unit_price(item) * item.quantity


def line_total_before_discount(item) -> Decimal:
    return unit_price(item) * item.quantity


def cart_subtotal(items: Iterable) -> Decimal:
    """sum of line totals with product-level discounts applied."""
    return sum((line_total(item) for item in items), ZERO)


def cart_subtotal_before_product_discounts(items: Iterable) -> Decimal:
    return sum((line_total_before_discount(item) for item in items), ZERO)
