import logging
from typing import Any, Dict, List, Optional, Set
from uuid import uuid4

from coffee_pos.schemas.orders import OrderItemPayload, OrderPayload, OrderReceipt

from .base import OrderGateway, OrderGatewayError

logger = logging.getLogger(__name__)


class MockOrderGateway(OrderGateway):
    """keeps orders in memory; the failure knobs are there for tests and demos."""

    def __init__(self, fail_order: bool = False, fail_product_ids: Optional[Set[int]] = None):
        self.fail_order = fail_order
        self.fail_product_ids: Set[int] = set(fail_product_ids or ())
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.order_items: Dict[str, List[Dict[str, Any]]] = {}

    def create_order(self, order: OrderPayload) -> OrderReceipt:
        if self.fail_order:
            raise OrderGatewayError("mock order API rejected the order")

        order_id = f"mock-{uuid4().hex[:8]}"
        data = order.model_dump(by_alias=True, mode="json")
        data["id"] = order_id
        self.orders[order_id] = data
        self.order_items[order_id] = []
        logger.debug("mock order %s created", order_id)
        return OrderReceipt(id=order_id, data=data)

    def create_order_item(self, order_id: str, item: OrderItemPayload) -> Dict[str, Any]:
        if order_id not in self.orders:
            raise OrderGatewayError(f"order {order_id} does not exist")
        if item.product_id in self.fail_product_ids:
            raise OrderGatewayError(f"mock order API rejected product {item.product_id}")

        data = item.model_dump(by_alias=True, mode="json")
        data["orderId"] = order_id
        data["id"] = f"mock-item-{uuid4().hex[:8]}"
        self.order_items[order_id].append(data)
        return data
