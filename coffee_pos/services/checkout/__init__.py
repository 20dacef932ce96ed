"""
Checkout: required-option validation and order submission.
"""

from .exceptions import (
    CheckoutError,
    EmptyCartError,
    CheckoutValidationError,
    PartialOrderSubmissionError,
    UnavailableProductError,
)
from .validation import MissingSelection, find_missing_selections, validate_cart_for_checkout
from .submission import OrderSubmissionService, build_order_item_payload

__all__ = [
    'CheckoutError',
    'EmptyCartError',
    'CheckoutValidationError',
    'PartialOrderSubmissionError',
    'UnavailableProductError',
    'MissingSelection',
    'find_missing_selections',
    'validate_cart_for_checkout',
    'OrderSubmissionService',
    'build_order_item_payload',
]
