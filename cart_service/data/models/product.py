from sqlalchemy import Column, Integer, String

from cart_service.data.database import Base


class ProductModel(Base):
    """Read-only view of the product catalog, used for joins."""

    __tablename__ = "products"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    price_cents = Column(Integer, nullable=False)
