"""
Checkout validation and order submission tests.
"""

from decimal import Decimal

import pytest

from coffee_pos.schemas.catalog import ProductOptions
from coffee_pos.schemas.orders import OrderStatus
from coffee_pos.services.checkout import (
    CheckoutValidationError,
    EmptyCartError,
    OrderSubmissionService,
    PartialOrderSubmissionError,
    UnavailableProductError,
    build_order_item_payload,
    find_missing_selections,
    validate_cart_for_checkout,
)
from coffee_pos.services.orders.base import OrderGatewayError
from coffee_pos.services.orders.mock import MockOrderGateway


class StaticOptions:
    """Options provider backed by a plain dict."""

    def __init__(self, options):
        self.options = options

    def get_product_options(self, product_ids):
        return {pid: self.options[pid] for pid in product_ids if pid in self.options}


@pytest.fixture
def options_provider():
    return StaticOptions({
        1: ProductOptions(product_id=1, size_ids=[11, 12], sugar_ids=[21, 22]),
        2: ProductOptions(product_id=2, sugar_ids=[23]),
        3: ProductOptions(product_id=3),
    })


@pytest.fixture
def ready_store(store, latte, croissant, medium, extra_shot, make_customization):
    """Latte fully customized plus a croissant, ready to submit."""
    store.add_item(latte, make_customization(size=medium, sugar="50%", sugar_id=21, extra_shot=extra_shot, note="oat milk"))
    store.add_item(croissant, make_customization(quantity=2))
    return store


class TestValidation:

    def test_missing_size_blocks_checkout(self, store, latte, options_provider, make_customization):
        store.add_item(latte, make_customization(sugar="50%", sugar_id=21))

        with pytest.raises(CheckoutValidationError) as exc:
            validate_cart_for_checkout(store.items, options_provider)

        assert "Iced Latte: size" in str(exc.value)
        assert exc.value.missing[0].fields == ["size"]

    def test_lists_every_missing_field(self, store, latte, americano, options_provider):
        store.add_item(latte)
        store.add_item(americano)

        missing = find_missing_selections(store.items, options_provider.get_product_options({1, 2}))

        assert [m.message for m in missing] == ["Iced Latte: size and sugar level", "Americano: sugar level"]

    def test_products_without_options_pass(self, store, croissant, options_provider):
        store.add_item(croissant)
        validate_cart_for_checkout(store.items, options_provider)

    def test_sugar_label_counts_as_selected(self, store, americano, options_provider, make_customization):
        store.add_item(americano, make_customization(sugar="0%"))
        validate_cart_for_checkout(store.items, options_provider)

    def test_unknown_product_blocks_checkout(self, store, croissant, options_provider):
        ghost = croissant.model_copy(update={"id": 999, "name": "Ghost Muffin"})
        store.add_item(croissant)
        ghost_line = store.add_item(ghost)

        with pytest.raises(UnavailableProductError) as exc:
            validate_cart_for_checkout(store.items, options_provider)

        assert exc.value.cart_item_ids == [ghost_line.cart_item_id]
        assert "Ghost Muffin" in str(exc.value)


class TestOrderItemPayload:

    def test_price_is_discounted_unit_price(self, store, latte, medium, extra_shot, make_customization):
        item = store.add_item(latte, make_customization(size=medium, extra_shot=extra_shot, quantity=2))
        payload = build_order_item_payload(item)

        assert payload.price == Decimal("4.73")
        assert payload.quantity == 2
        assert payload.size_id == 11
        assert payload.extra_shot_id == 31

    def test_camel_case_on_the_wire(self, store, croissant):
        data = build_order_item_payload(store.add_item(croissant)).model_dump(by_alias=True, mode="json")
        assert data["productId"] == 3
        assert data["price"] == 3.0
        assert "sizeId" in data and "extraShotId" in data


class TestSubmission:

    def test_successful_submission_clears_cart(self, ready_store, options_provider):
        gateway = MockOrderGateway()
        ready_store.set_discount("amount", 1)
        ready_store.set_note("table 3")
        service = OrderSubmissionService(gateway, options_provider)

        result = service.submit(ready_store, payment_method="cash", amount_paid="20")

        # latte 5.25 * 0.9 = 4.725, croissants 6.00, minus $1 manual
        assert result.total == Decimal("9.73")
        assert result.discount == Decimal("1.00")
        assert result.payment_status is True
        assert result.change_due == Decimal("10.27")
        assert result.item_count == 3
        assert ready_store.items == []
        assert ready_store.note is None

        order = gateway.orders[result.order_id]
        assert order["paymentMethod"] == "cash"
        assert order["orderStatus"] == "Completed"
        assert order["total"] == 9.73
        assert order["note"] == "table 3"
        lines = gateway.order_items[result.order_id]
        assert [line["quantity"] for line in lines] == [1, 2]
        assert lines[0]["note"] == "oat milk"

    def test_underpaid_order_is_unpaid(self, ready_store, options_provider):
        service = OrderSubmissionService(MockOrderGateway(), options_provider)
        result = service.submit(ready_store, payment_method="cash", amount_paid="5")

        assert result.payment_status is False
        assert result.change_due == Decimal("0")

    def test_exact_payment_counts_as_paid(self, ready_store, options_provider):
        service = OrderSubmissionService(MockOrderGateway(), options_provider)
        result = service.submit(ready_store, payment_method="card", amount_paid="10.73")
        assert result.payment_status is True

    def test_draft_orders(self, ready_store, options_provider):
        gateway = MockOrderGateway()
        result = OrderSubmissionService(gateway, options_provider).submit(
            ready_store, payment_method="cash", order_status=OrderStatus.DRAFT,
        )

        assert result.order_status == OrderStatus.DRAFT
        assert result.payment_status is False
        assert gateway.orders[result.order_id]["orderStatus"] == "Draft"

    def test_empty_cart(self, store, options_provider):
        with pytest.raises(EmptyCartError):
            OrderSubmissionService(MockOrderGateway(), options_provider).submit(store, payment_method="cash")

    def test_validation_failure_sends_nothing(self, store, latte, options_provider):
        gateway = MockOrderGateway()
        store.add_item(latte)

        with pytest.raises(CheckoutValidationError):
            OrderSubmissionService(gateway, options_provider).submit(store, payment_method="cash", amount_paid=100)

        assert gateway.orders == {}
        assert len(store.items) == 1

    def test_header_failure_keeps_cart(self, ready_store, options_provider):
        gateway = MockOrderGateway(fail_order=True)

        with pytest.raises(OrderGatewayError):
            OrderSubmissionService(gateway, options_provider).submit(ready_store, payment_method="cash", amount_paid=100)

        assert len(ready_store.items) == 2

    def test_partial_failure_keeps_cart(self, ready_store, options_provider):
        croissant_line = ready_store.items[1]
        gateway = MockOrderGateway(fail_product_ids={croissant_line.product_id})

        with pytest.raises(PartialOrderSubmissionError) as exc:
            OrderSubmissionService(gateway, options_provider).submit(ready_store, payment_method="cash", amount_paid=100)

        assert exc.value.failed_cart_item_ids == [croissant_line.cart_item_id]
        assert exc.value.order_id in gateway.orders
        assert len(gateway.order_items[exc.value.order_id]) == 1
        assert len(ready_store.items) == 2
