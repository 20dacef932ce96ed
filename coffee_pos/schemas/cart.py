from decimal import Decimal
from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from coffee_pos.core.config import settings

from .promotions import AppliedPromotion
from .types import Money

DiscountType = Literal["percent", "amount"]


class SizeSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price_modifier: Money = Decimal("0")


class ExtraShotSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price_modifier: Money = Decimal("0")


class ItemCustomization(BaseModel):
    """everything a product detail form can pick in one go."""
    size: Optional[SizeSelection] = None
    sugar: Optional[str] = None
    sugar_id: Optional[int] = None
    ice: Optional[str] = None
    ice_id: Optional[int] = None
    extra_shot: Optional[ExtraShotSelection] = None
    note: Optional[str] = Field(default=None, max_length=settings.NOTE_MAX_LENGTH)
    quantity: int = Field(default=1, ge=1)


class CartLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    cart_item_id: str
    product_id: int
    name: str
    image: Optional[str] = None
    quantity: int = Field(ge=1)
    base_price: Money  # list price captured at add time
    discount: Money = Decimal("0")  # product-level percent captured at add time
    size: Optional[SizeSelection] = None
    sugar: Optional[str] = None
    sugar_id: Optional[int] = None
    ice: Optional[str] = None
    ice_id: Optional[int] = None
    extra_shot: Optional[ExtraShotSelection] = None
    note: Optional[str] = Field(default=None, max_length=settings.NOTE_MAX_LENGTH)


class ManualDiscount(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: DiscountType
    value: Money


class CartSummary(BaseModel):
    subtotal: Money
    subtotal_before_product_discounts: Money
    product_discounts: Money
    promotion_discount: Money
    applied_promotions: List[AppliedPromotion] = Field(default_factory=list)
    discount_amount: Money  # manual discount only
    total: Money
    item_count: int
    evaluated_at: datetime


class CartLineItemOut(CartLineItem):
    unit_price: Money
    discounted_unit_price: Money
    line_total: Money


class CartOut(BaseModel):
    session_id: str
    items: List[CartLineItemOut] = Field(default_factory=list)
    discount: Optional[ManualDiscount] = None
    note: Optional[str] = None
    summary: CartSummary


class AddToCartRequest(BaseModel):
    product_id: int
    size_id: Optional[int] = None
    sugar_id: Optional[int] = None
    ice_id: Optional[int] = None
    extra_shot_id: Optional[int] = None
    note: Optional[str] = Field(default=None, max_length=settings.NOTE_MAX_LENGTH)
    quantity: int = Field(default=1, ge=1)


class CartSessionOut(BaseModel):
    session_id: str
    cart: CartOut
