"""
Line item pricing and money coercion.
"""

from decimal import Decimal

import pytest

from coffee_pos.schemas.cart import CartLineItem
from coffee_pos.services.pricing.line_item import (
    cart_subtotal,
    cart_subtotal_before_product_discounts,
    discounted_unit_price,
    line_total,
    line_total_before_discount,
    unit_price,
)
from coffee_pos.services.pricing.money import quantize_money, to_decimal, to_quantity


def make_line(**overrides):
    fields = {
        "cart_item_id": "cart_test",
        "product_id": 1,
        "name": "Iced Latte",
        "quantity": 1,
        "base_price": Decimal("4.00"),
    }
    fields.update(overrides)
    return CartLineItem(**fields)


class TestMoneyCoercion:

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "NaN", float("nan"), float("inf"), "-Infinity", True])
    def test_junk_becomes_zero(self, raw):
        assert to_decimal(raw) == Decimal("0")

    def test_numbers_and_numeric_text(self):
        assert to_decimal("4.50") == Decimal("4.50")
        assert to_decimal(" 3 ") == Decimal("3")
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(7) == Decimal("7")

    def test_quantity_truncates(self):
        assert to_quantity("3.9") == 3
        assert to_quantity("abc") == 0
        assert to_quantity(-2) == -2
        assert to_quantity("0.5") == 0

    def test_quantize_rounds_half_up(self):
        assert quantize_money(Decimal("4.725")) == Decimal("4.73")
        assert quantize_money(Decimal("1.005")) == Decimal("1.01")


class TestLineItemPricing:

    def test_modifiers_and_product_discount(self, medium, extra_shot):
        """$4.00 + $0.50 size + $0.75 shot at 10% off, two units."""
        item = make_line(size=medium, extra_shot=extra_shot, discount=Decimal("10"), quantity=2)

        assert unit_price(item) == Decimal("5.25")
        assert discounted_unit_price(item) == Decimal("4.725")
        assert line_total(item) == Decimal("9.45")
        assert line_total_before_discount(item) == Decimal("10.50")

    def test_no_discount_means_equal_prices(self):
        item = make_line()
        assert discounted_unit_price(item) == unit_price(item)

    def test_discounted_price_never_above_unit_price(self, medium):
        item = make_line(size=medium, discount=Decimal("25"))
        assert discounted_unit_price(item) < unit_price(item)

    def test_product_discount_is_clamped(self):
        assert discounted_unit_price(make_line(discount=Decimal("150"))) == Decimal("0")
        assert discounted_unit_price(make_line(discount=Decimal("-20"))) == Decimal("4.00")

    def test_nan_price_is_zero(self):
        item = make_line(base_price="NaN")
        assert item.base_price == Decimal("0")
        assert line_total(item) == Decimal("0")

    def test_cart_subtotals(self, medium):
        items = [
            make_line(cart_item_id="a", discount=Decimal("50"), quantity=2),
            make_line(cart_item_id="b", size=medium),
        ]
        assert cart_subtotal(items) == Decimal("8.50")
        assert cart_subtotal_before_product_discounts(items) == Decimal("12.50")

    def test_empty_cart_subtotal_is_zero(self):
        assert cart_subtotal([]) == Decimal("0")
