from decimal import Decimal
from enum import Enum
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from .types import Money


class PromotionType(str, Enum):
    BUY_X_GET_Y = "BUY_X_GET_Y"
    PERCENT_DISCOUNT = "PERCENT_DISCOUNT"
    FIXED_DISCOUNT = "FIXED_DISCOUNT"


class Promotion(BaseModel):
    id: int
    name: str
    type: PromotionType
    buy_quantity: Optional[int] = None
    free_quantity: Optional[int] = None
    discount: Optional[Money] = None  # percent for PERCENT_DISCOUNT, currency for FIXED_DISCOUNT
    start_date: datetime
    end_date: datetime
    is_active: bool = True

    class Config:
        from_attributes = True


class AppliedPromotion(BaseModel):
    promotion_id: int
    promotion_name: str
    type: PromotionType
    discount_amount: Money


class PromotionResult(BaseModel):
    applied_promotions: List[AppliedPromotion] = Field(default_factory=list)
    promotion_discount: Money = Decimal("0")


class PromotionOut(Promotion):
    label: str
    status: str  # inactive|upcoming|active|expired
