from .money import ZERO, to_decimal, to_quantity, quantize_money
from .line_item import (
    unit_price,
    discounted_unit_price,
    line_total,
    line_total_before_discount,
    cart_subtotal,
    cart_subtotal_before_product_discounts,
)

__all__ = [
    "ZERO",
    "to_decimal",
    "to_quantity",
    "quantize_money",
    "unit_price",
    "discounted_unit_price",
    "line_total",
    "line_total_before_discount",
    "cart_subtotal",
    "cart_subtotal_before_product_discounts",
]
