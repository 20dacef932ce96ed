from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from coffee_pos.schemas.promotions import AppliedPromotion, Promotion, PromotionResult, PromotionType
from coffee_pos.services.pricing.line_item import cart_subtotal, discounted_unit_price
from coffee_pos.services.pricing.money import HUNDRED, ZERO, clamp, to_decimal, to_quantity


def as_utc(moment: datetime) -> datetime:
    # catalog rows are naive UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def is_promotion_eligible(promotion: Promotion, now: datetime) -> bool:
    if not promotion.is_active:
        return False
    moment = as_utc(now)
    return as_utc(promotion.start_date) <= moment <= as_utc(promotion.end_date)


def _buy_x_get_y_discount(promotion: Promotion, items: Sequence) -> Decimal:
    buy_quantity = to_quantity(promotion.buy_quantity)
    free_quantity = to_quantity(promotion.free_quantity)
    if buy_quantity <= 0 or free_quantity <= 0 or not items:
        return ZERO

    total_quantity = sum(item.quantity for item in items)
    complete_groups = total_quantity // (buy_quantity + free_quantity)
    if complete_groups <= 0:
        return ZERO

    # free units are priced at the cheapest qualifying unit
    reference_unit_price = min(discounted_unit_price(item) for item in items)
    return reference_unit_price * complete_groups * free_quantity


def calculate_promotion_discount(promotion: Promotion, items: Sequence, subtotal: Decimal) -> Decimal:
    """discount contributed by one promotion against the product-discounted subtotal."""
    if subtotal <= ZERO:
        return ZERO

    if promotion.type == PromotionType.PERCENT_DISCOUNT:
        percent = clamp(to_decimal(promotion.discount), ZERO, HUNDRED)
        return subtotal * (percent / HUNDRED)

    if promotion.type == PromotionType.FIXED_DISCOUNT:
        return min(max(to_decimal(promotion.discount), ZERO), subtotal)

    if promotion.type == PromotionType.BUY_X_GET_Y:
        return _buy_x_get_y_discount(promotion, items)

    return ZERO


def _display_order(promotions: Iterable[Promotion]) -> List[Promotion]:
    # buy-x-get-y first, then catalog order; amounts do not depend on it
    return sorted(promotions, key=lambda p: p.type != PromotionType.BUY_X_GET_Y)


def evaluate_promotions(
    items: Sequence,
    promotions: Optional[Iterable[Promotion]],
    now: datetime,
    subtotal: Optional[Decimal] = None,
) -> PromotionResult:
    """Evaluate every eligible promotion against the current cart.

    Promotions stack additively: each one is computed against the same
    subtotal, and the sum is capped at that subtotal. Zero-value entries
    stay in ``applied_promotions``; hiding them is up to the caller.
    """
    if not promotions:
        return PromotionResult()

    items = list(items)
    if subtotal is None:
        subtotal = cart_subtotal(items)

    applied: List[AppliedPromotion] = []
    total = ZERO
    for promotion in _display_order(p for p in promotions if is_promotion_eligible(p, now)):
        amount = calculate_promotion_discount(promotion, items, subtotal)
        applied.append(AppliedPromotion(
            promotion_id=promotion.id,
            promotion_name=promotion.name,
            type=promotion.type,
            discount_amount=amount,
        ))
        total += amount

    return PromotionResult(
        applied_promotions=applied,
        promotion_discount=clamp(total, ZERO, max(subtotal, ZERO)),
    )
