from typing import Any, Dict

from coffee_pos.schemas.orders import OrderItemPayload, OrderPayload, OrderReceipt


class OrderGatewayError(Exception):
    """The order persistence API failed or could not be reached."""
    pass


class OrderGateway:
    """base interface for the external order persistence API."""

    def create_order(self, order: OrderPayload) -> OrderReceipt:  # pragma: no cover
        raise NotImplementedError

    def create_order_item(self, order_id: str, item: OrderItemPayload) -> Dict[str, Any]:  # pragma: no cover
        raise NotImplementedError

    def close(self) -> None:
        """release connections; nothing to do by default."""
        pass
