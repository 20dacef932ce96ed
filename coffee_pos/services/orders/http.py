import logging
from typing import Any, Dict, Optional

import httpx

from coffee_pos.core.config import settings
from coffee_pos.schemas.orders import OrderItemPayload, OrderPayload, OrderReceipt

from .base import OrderGateway, OrderGatewayError

logger = logging.getLogger(__name__)

ORDER_PATH = "/api/order"
ORDER_ITEM_PATH = "/api/order_item"


class HttpOrderGateway(OrderGateway):
    """
    Posts orders to the back-office order API.

    Args:
        base_url: API root, defaults to ORDER_API_BASE_URL
        timeout: seconds per request, defaults to ORDER_API_TIMEOUT_SECONDS
        client: preconfigured httpx.Client (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        self._client = client or httpx.Client(
            base_url=base_url or settings.ORDER_API_BASE_URL,
            timeout=timeout if timeout is not None else settings.ORDER_API_TIMEOUT_SECONDS,
        )

    def close(self) -> None:
        self._client.close()

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            r = self._client.post(path, json=payload)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("order API %s returned %s", path, e.response.status_code)
            raise OrderGatewayError(f"order API {path} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("order API %s request failed: %s", path, e)
            raise OrderGatewayError(f"order API {path} request failed: {e}") from e

        try:
            body = r.json()
        except ValueError as e:
            raise OrderGatewayError(f"order API {path} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise OrderGatewayError(f"order API {path} returned unexpected body")
        return body

    def create_order(self, order: OrderPayload) -> OrderReceipt:
        body = self._post(ORDER_PATH, order.model_dump(by_alias=True, mode="json"))
        order_id = body.get("id")
        if order_id is None:
            raise OrderGatewayError("order API response has no order id")
        return OrderReceipt(id=str(order_id), data=body)

    def create_order_item(self, order_id: str, item: OrderItemPayload) -> Dict[str, Any]:
        payload = item.model_dump(by_alias=True, mode="json")
        payload["orderId"] = order_id
        return self._post(ORDER_ITEM_PATH, payload)
