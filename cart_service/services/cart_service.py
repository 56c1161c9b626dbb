# cart_service/services/cart_service.py
from typing import Any, Dict, List

from cart_service.domain.exceptions import CartNotFoundError, ValidationError
from cart_service.repos.cart_repo import CartRepo, CartRow
from cart_service.utils.logging import get_logger

logger = get_logger(__name__)


def _require_id(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")
    return value


def _require_quantity(quantity: Any) -> int:
    #bool is an int subclass, True must not count as 1
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("quantity must be an integer")
    if quantity <= 0:
        raise ValidationError("quantity must be > 0")
    return quantity


class CartService:
    """
    Use cases for the cart domain.

    Commands (create, add, decrease, remove, empty) change state,
    queries (get, view) only read. Input is validated here so that a bad
    request never reaches the database. Errors from the repo are passed
    through as-is and nothing is retried.
    """

    def __init__(self, repo: CartRepo):
        self.repo = repo

    #query
    def get_cart(self, cart_id: str) -> List[CartRow]:
        _require_id("cart_id", cart_id)
        return self.repo.get_cart(cart_id)

    def view_cart(self, cart_id: str) -> Dict[str, Any]:
        """
        Cart header with its items.

        Unlike get_cart, a cart that doesn't exist is reported as
        CartNotFoundError instead of an empty item list.
        """
        _require_id("cart_id", cart_id)

        cart, items = self.repo.get_cart_with_items(cart_id)
        if cart is None:
            raise CartNotFoundError(cart_id)

        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status,
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
            "items": items,
        }

    #commands
    def create_cart(self, user_id: str) -> str:
        _require_id("user_id", user_id)

        cart_id = self.repo.create_cart(user_id)
        logger.info(f"Created cart {cart_id} for user {user_id}")
        return cart_id

    def add_item(self, cart_id: str, product_id: str, quantity: int) -> None:
        _require_id("cart_id", cart_id)
        _require_id("product_id", product_id)
        _require_quantity(quantity)

        self.repo.add_item(cart_id, product_id, quantity)
        logger.info(f"Added {quantity} x {product_id} to cart {cart_id}")

    def decrease_item(self, cart_id: str, product_id: str, quantity: int) -> None:
        _require_id("cart_id", cart_id)
        _require_id("product_id", product_id)
        _require_quantity(quantity)

        self.repo.decrease_item(cart_id, product_id, quantity)
        logger.info(f"Decreased {product_id} by {quantity} in cart {cart_id}")

    def remove_item(self, cart_id: str, product_id: str) -> None:
        _require_id("cart_id", cart_id)
        _require_id("product_id", product_id)

        self.repo.remove_item(cart_id, product_id)
        logger.info(f"Removed {product_id} from cart {cart_id}")

    def empty_cart(self, cart_id: str) -> None:
        _require_id("cart_id", cart_id)

        self.repo.empty_cart(cart_id)
        logger.info(f"Emptied cart {cart_id}")
