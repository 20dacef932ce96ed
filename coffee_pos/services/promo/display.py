from datetime import datetime
from decimal import Decimal
from typing import Iterable, List

from coffee_pos.schemas.promotions import AppliedPromotion, Promotion, PromotionType
from coffee_pos.services.pricing.money import ZERO, to_decimal

from .evaluator import as_utc


def _plain_number(value) -> str:
    number = to_decimal(value)
    if number == number.to_integral_value():
        return str(number.quantize(Decimal("1")))
    return str(number.normalize())


def promotion_label(promotion: Promotion) -> str:
    if promotion.type == PromotionType.BUY_X_GET_Y:
        return f"Buy {promotion.buy_quantity or 0} Get {promotion.free_quantity or 0} Free"
    if promotion.type == PromotionType.PERCENT_DISCOUNT:
        return f"{_plain_number(promotion.discount)}% Off"
    if promotion.type == PromotionType.FIXED_DISCOUNT:
        return f"${_plain_number(promotion.discount)} Off"
    return "Special Offer"


def promotion_status(promotion: Promotion, now: datetime) -> str:
    if not promotion.is_active:
        return "inactive"
    moment = as_utc(now)
    if moment < as_utc(promotion.start_date):
        return "upcoming"
    if moment > as_utc(promotion.end_date):
        return "expired"
    return "active"


def visible_promotions(applied: Iterable[AppliedPromotion]) -> List[AppliedPromotion]:
    """what the cashier summary shows: only promotions that actually saved money."""
    return [entry for entry in applied if entry.discount_amount > ZERO]
