#import all models so SQLAlchemy registers them in Base.metadata

from cart_service.data.models.cart import CartModel
from cart_service.data.models.cart_item import CartItemModel
from cart_service.data.models.product import ProductModel

__all__ = ["CartModel", "CartItemModel", "ProductModel"]
