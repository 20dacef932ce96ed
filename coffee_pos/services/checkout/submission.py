import logging
from datetime import datetime
from typing import Any, List, Optional

from coffee_pos.schemas.cart import CartLineItem
from coffee_pos.schemas.orders import (
    OrderItemPayload,
    OrderPayload,
    OrderStatus,
    SubmissionResult,
)
from coffee_pos.services.cart.store import CartStore
from coffee_pos.services.orders.base import OrderGateway, OrderGatewayError
from coffee_pos.services.pricing.line_item import discounted_unit_price
from coffee_pos.services.pricing.money import ZERO, quantize_money

from .exceptions import EmptyCartError, PartialOrderSubmissionError
from .validation import ProductOptionsProvider, validate_cart_for_checkout

logger = logging.getLogger(__name__)


def build_order_item_payload(item: CartLineItem) -> OrderItemPayload:
    return OrderItemPayload(
        product_id=item.product_id,
        price=quantize_money(discounted_unit_price(item)),
        quantity=item.quantity,
        size_id=item.size.id if item.size is not None else None,
        sugar_id=item.sugar_id,
        ice_id=item.ice_id,
        extra_shot_id=item.extra_shot.id if item.extra_shot is not None else None,
        note=item.note,
    )


class OrderSubmissionService:
    """
    Turns a session cart into an order on the persistence API.

    The cart is cleared only once the header and every line item were
    created; any failure leaves it untouched for the cashier to retry.
    """

    def __init__(self, gateway: OrderGateway, options_provider: ProductOptionsProvider):
        self.gateway = gateway
        self.options_provider = options_provider

    def submit(
        self,
        store: CartStore,
        payment_method: str,
        amount_paid: Any = None,
        order_status: OrderStatus = OrderStatus.COMPLETED,
        now: Optional[datetime] = None,
    ) -> SubmissionResult:
        items = store.items
        if not items:
            raise EmptyCartError("Cart is empty")

        validate_cart_for_checkout(items, self.options_provider)

        summary = store.summary(now)
        total = quantize_money(summary.total)
        discount = quantize_money(summary.discount_amount)
        paid = quantize_money(amount_paid)

        order = OrderPayload(
            payment_method=payment_method,
            payment_status=paid >= total,
            order_status=order_status,
            discount=discount,
            total=total,
            note=store.note,
        )
        # header failure propagates as is, nothing was written yet
        receipt = self.gateway.create_order(order)
        logger.info("order %s created (%s, total %s)", receipt.id, order_status.value, total)

        failed: List[str] = []
        for item in items:
            try:
                self.gateway.create_order_item(receipt.id, build_order_item_payload(item))
            except OrderGatewayError as e:
                logger.error("order %s: line %s not created: %s", receipt.id, item.cart_item_id, e)
                failed.append(item.cart_item_id)
        if failed:
            raise PartialOrderSubmissionError(receipt.id, failed)

        store.remove_all()
        return SubmissionResult(
            order_id=receipt.id,
            order_status=order_status,
            total=total,
            discount=discount,
            amount_paid=paid,
            payment_status=order.payment_status,
            change_due=max(ZERO, paid - total),
            item_count=summary.item_count,
        )
