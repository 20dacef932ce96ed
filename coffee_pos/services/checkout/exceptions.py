"""Domain exceptions for checkout and order submission."""
from typing import List, Sequence


class CheckoutError(Exception):
    """Base exception for all checkout errors."""
    pass


class EmptyCartError(CheckoutError):
    """Nothing to submit."""
    pass


class CheckoutValidationError(CheckoutError):
    """One or more lines miss a required size or sugar level."""

    def __init__(self, missing: Sequence):
        self.missing = list(missing)
        self.messages: List[str] = [m.message for m in self.missing]
        super().__init__("Please select missing options for: " + "; ".join(self.messages))


class PartialOrderSubmissionError(CheckoutError):
    """The order header exists but some line items were not created."""

    def __init__(self, order_id: str, failed_cart_item_ids: Sequence[str]):
        self.order_id = order_id
        self.failed_cart_item_ids = list(failed_cart_item_ids)
        super().__init__(
            f"Order {order_id} created but {len(self.failed_cart_item_ids)} item(s) failed: "
            + ", ".join(self.failed_cart_item_ids)
        )


class UnavailableProductError(CheckoutError):
    """Cart lines reference products the catalog no longer sells."""

    def __init__(self, cart_item_ids: Sequence[str], product_names: Sequence[str]):
        self.cart_item_ids = list(cart_item_ids)
        self.product_names = list(product_names)
        super().__init__("Products no longer available: " + ", ".join(self.product_names))
