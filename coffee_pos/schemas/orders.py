from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .types import Money


class OrderStatus(str, Enum):
    COMPLETED = "Completed"
    DRAFT = "Draft"


class OrderItemPayload(BaseModel):
    """one line item as the order API expects it (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: int
    price: Money  # discounted unit price at submission time
    quantity: int
    size_id: Optional[int] = None
    sugar_id: Optional[int] = None
    ice_id: Optional[int] = None
    extra_shot_id: Optional[int] = None
    note: Optional[str] = None


class OrderPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    payment_method: str
    payment_status: bool
    order_status: OrderStatus
    discount: Money  # manual discount only
    total: Money
    note: Optional[str] = None


class OrderReceipt(BaseModel):
    id: str
    data: Dict[str, Any] = Field(default_factory=dict)


class CheckoutRequest(BaseModel):
    payment_method: str = "cash"
    amount_paid: Optional[Money] = None
    order_status: OrderStatus = OrderStatus.COMPLETED


class SubmissionResult(BaseModel):
    order_id: str
    order_status: OrderStatus
    total: Money
    discount: Money
    amount_paid: Money
    payment_status: bool
    change_due: Money = Decimal("0")
    item_count: int


class MissingSelectionOut(BaseModel):
    cart_item_id: str
    product_name: str
    fields: List[str]
