"""Domain exceptions for the session cart."""


class CartError(Exception):
    """Base exception for all cart errors."""
    pass


class CartValidationError(CartError):
    """Raw cashier input was rejected before touching the cart."""
    pass


class InvalidDiscountError(CartValidationError):
    """Manual discount input is not a finite non-negative number."""
    pass


class InvalidNoteError(CartValidationError):
    """Note is blank where one is required, or too long."""
    pass


class CartSessionNotFoundError(CartError):
    """No cart is registered under this session id."""
    pass
