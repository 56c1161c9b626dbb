"""
Business-level exceptions raised by the cart store and service.
Routers translate them into HTTP responses.
"""


class CartServiceError(Exception):
    """Base exception for all cart errors."""
    def __init__(self, message: str = "Cart operation failed"):
        self.message = message
        super().__init__(self.message)


class ValidationError(CartServiceError, ValueError):
    """Caller supplied a structurally invalid request (blank id, bad quantity)."""
    pass


class CartNotFoundError(CartServiceError, LookupError):
    """Raised when a cart is required to exist but doesn't."""
    def __init__(self, cart_id: str):
        self.cart_id = cart_id
        super().__init__(f"Cart {cart_id} not found")


class PersistenceError(CartServiceError, RuntimeError):
    """The backing store failed or returned something unusable."""
    pass


class StorageTimeoutError(PersistenceError):
    """A statement was cancelled because it ran past the timeout."""
    pass
