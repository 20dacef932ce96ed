"""
Promotion evaluation and display helpers.
"""

from datetime import timedelta
from decimal import Decimal

from coffee_pos.schemas.cart import CartLineItem
from coffee_pos.schemas.promotions import PromotionType
from coffee_pos.services.promo import (
    evaluate_promotions,
    is_promotion_eligible,
    promotion_label,
    promotion_status,
    visible_promotions,
)

BUY = PromotionType.BUY_X_GET_Y
PERCENT = PromotionType.PERCENT_DISCOUNT
FIXED = PromotionType.FIXED_DISCOUNT


def line(cart_item_id, price, quantity, discount="0"):
    return CartLineItem(
        cart_item_id=cart_item_id,
        product_id=1,
        name=cart_item_id,
        quantity=quantity,
        base_price=Decimal(price),
        discount=Decimal(discount),
    )


class TestEligibility:

    def test_active_inside_window(self, make_promotion, fixed_now):
        assert is_promotion_eligible(make_promotion(), fixed_now)

    def test_inactive_flag(self, make_promotion, fixed_now):
        assert not is_promotion_eligible(make_promotion(is_active=False), fixed_now)

    def test_window_bounds_are_inclusive(self, make_promotion, fixed_now):
        assert is_promotion_eligible(make_promotion(start_date=fixed_now), fixed_now)
        assert is_promotion_eligible(make_promotion(end_date=fixed_now), fixed_now)

    def test_outside_window(self, make_promotion, fixed_now):
        upcoming = make_promotion(start_date=fixed_now + timedelta(seconds=1))
        expired = make_promotion(end_date=fixed_now - timedelta(seconds=1))
        assert not is_promotion_eligible(upcoming, fixed_now)
        assert not is_promotion_eligible(expired, fixed_now)

    def test_naive_dates_are_utc(self, make_promotion, fixed_now):
        naive_now = fixed_now.replace(tzinfo=None)
        promo = make_promotion(start_date=naive_now - timedelta(hours=1), end_date=naive_now + timedelta(hours=1))
        assert is_promotion_eligible(promo, fixed_now)


class TestEvaluation:

    def test_buy_two_get_one(self, make_promotion, fixed_now):
        """Six qualifying units at $3 make two complete groups."""
        promo = make_promotion(type=BUY, buy_quantity=2, free_quantity=1)
        result = evaluate_promotions([line("coffee", "3.00", 6)], [promo], fixed_now)

        assert result.promotion_discount == Decimal("6")
        assert result.applied_promotions[0].discount_amount == Decimal("6")

    def test_buy_x_get_y_uses_cheapest_unit(self, make_promotion, fixed_now):
        promo = make_promotion(type=BUY, buy_quantity=2, free_quantity=1)
        items = [line("latte", "5.00", 1), line("espresso", "6.00", 2, discount="50")]

        result = evaluate_promotions(items, [promo], fixed_now)
        assert result.promotion_discount == Decimal("3")

    def test_buy_x_get_y_below_minimum_is_kept_at_zero(self, make_promotion, fixed_now):
        promo = make_promotion(type=BUY, buy_quantity=2, free_quantity=1)
        result = evaluate_promotions([line("coffee", "3.00", 2)], [promo], fixed_now)

        assert len(result.applied_promotions) == 1
        assert result.applied_promotions[0].discount_amount == Decimal("0")
        assert visible_promotions(result.applied_promotions) == []

    def test_percent_discount(self, make_promotion, fixed_now):
        promo = make_promotion(type=PERCENT, discount=Decimal("10"))
        result = evaluate_promotions([line("a", "10.00", 2)], [promo], fixed_now)
        assert result.promotion_discount == Decimal("2")

    def test_fixed_discount_capped_at_subtotal(self, make_promotion, fixed_now):
        promo = make_promotion(type=FIXED, discount=Decimal("25"))
        result = evaluate_promotions([line("a", "10.00", 2)], [promo], fixed_now)
        assert result.promotion_discount == Decimal("20")

    def test_promotions_stack_and_are_capped(self, make_promotion, fixed_now):
        fixed = make_promotion(type=FIXED, discount=Decimal("15"))
        percent = make_promotion(type=PERCENT, discount=Decimal("50"))
        items = [line("a", "10.00", 2)]

        result = evaluate_promotions(items, [fixed, percent], fixed_now)
        assert [p.discount_amount for p in result.applied_promotions] == [Decimal("15"), Decimal("10")]
        assert result.promotion_discount == Decimal("20")

    def test_stacking_is_order_independent(self, make_promotion, fixed_now):
        promos = [
            make_promotion(type=FIXED, discount=Decimal("3")),
            make_promotion(type=PERCENT, discount=Decimal("10")),
            make_promotion(type=BUY, buy_quantity=1, free_quantity=1),
        ]
        items = [line("a", "4.00", 2), line("b", "2.50", 3)]

        forward = evaluate_promotions(items, promos, fixed_now)
        backward = evaluate_promotions(items, list(reversed(promos)), fixed_now)
        assert forward.promotion_discount == backward.promotion_discount

    def test_buy_x_get_y_listed_first(self, make_promotion, fixed_now):
        percent = make_promotion(type=PERCENT, discount=Decimal("5"), name="Morning")
        buy = make_promotion(type=BUY, buy_quantity=1, free_quantity=1, name="BOGO")
        fixed = make_promotion(type=FIXED, discount=Decimal("1"), name="Dollar Off")

        result = evaluate_promotions([line("a", "4.00", 2)], [percent, buy, fixed], fixed_now)
        assert [p.promotion_name for p in result.applied_promotions] == ["BOGO", "Morning", "Dollar Off"]

    def test_ineligible_promotions_are_skipped(self, make_promotion, fixed_now):
        active = make_promotion(type=FIXED, discount=Decimal("1"))
        inactive = make_promotion(type=FIXED, discount=Decimal("5"), is_active=False)

        result = evaluate_promotions([line("a", "10.00", 1)], [active, inactive], fixed_now)
        assert [p.promotion_id for p in result.applied_promotions] == [active.id]
        assert result.promotion_discount == Decimal("1")

    def test_no_promotions(self, fixed_now):
        result = evaluate_promotions([line("a", "10.00", 1)], None, fixed_now)
        assert result.applied_promotions == []
        assert result.promotion_discount == Decimal("0")

    def test_empty_cart_gets_nothing(self, make_promotion, fixed_now):
        promo = make_promotion(type=FIXED, discount=Decimal("5"))
        result = evaluate_promotions([], [promo], fixed_now)
        assert result.promotion_discount == Decimal("0")


class TestDisplay:

    def test_labels(self, make_promotion):
        assert promotion_label(make_promotion(type=BUY, buy_quantity=2, free_quantity=1)) == "Buy 2 Get 1 Free"
        assert promotion_label(make_promotion(type=PERCENT, discount=Decimal("15.00"))) == "15% Off"
        assert promotion_label(make_promotion(type=FIXED, discount=Decimal("2.50"))) == "$2.5 Off"

    def test_status(self, make_promotion, fixed_now):
        assert promotion_status(make_promotion(), fixed_now) == "active"
        assert promotion_status(make_promotion(is_active=False), fixed_now) == "inactive"
        assert promotion_status(make_promotion(start_date=fixed_now + timedelta(days=1), end_date=fixed_now + timedelta(days=2)), fixed_now) == "upcoming"
        assert promotion_status(make_promotion(start_date=fixed_now - timedelta(days=2), end_date=fixed_now - timedelta(days=1)), fixed_now) == "expired"
