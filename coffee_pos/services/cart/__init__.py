"""
Session cart package.

The store itself lives in ``coffee_pos.services.cart.store``; only the
exceptions are re-exported here so pricing modules can raise them
without importing the store.
"""

from .exceptions import (
    CartError,
    CartValidationError,
    InvalidDiscountError,
    InvalidNoteError,
    CartSessionNotFoundError,
)

__all__ = [
    'CartError',
    'CartValidationError',
    'InvalidDiscountError',
    'InvalidNoteError',
    'CartSessionNotFoundError',
]
