"""
Promotion and discount services.

- evaluator: time-windowed store promotions against the cart
- manual: the single cashier-entered discount
- display: labels and status for promotion panels
"""

from .evaluator import (
    is_promotion_eligible,
    calculate_promotion_discount,
    evaluate_promotions,
)
from .manual import parse_manual_discount, manual_discount_amount
from .display import promotion_label, promotion_status, visible_promotions

__all__ = [
    'is_promotion_eligible',
    'calculate_promotion_discount',
    'evaluate_promotions',
    'parse_manual_discount',
    'manual_discount_amount',
    'promotion_label',
    'promotion_status',
    'visible_promotions',
]
