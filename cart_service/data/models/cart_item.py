from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from cart_service.data.database import Base
from cart_service.data.models.cart import new_id, utcnow


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True, default=new_id)
    cart_id = Column(String(36), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    #no FK to products, the catalog is owned by another service
    product_id = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="u_cart_product"),
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity"),
    )
