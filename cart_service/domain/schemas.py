# cart_service/domain/schemas.py
from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, StrictInt


class CreateCartIn(BaseModel):
    """Body for creating a cart."""

    user_id: str


class CreateCartOut(BaseModel):
    cart_id: str


class ItemIn(BaseModel):
    """Body for adding a product to a cart."""

    product_id: str
    quantity: StrictInt


class DecreaseIn(BaseModel):
    """Body for decreasing a line item's quantity."""

    quantity: StrictInt


class CartItemOut(BaseModel):
    """One line of a cart joined with its product."""

    item_id: str
    product_id: str
    quantity: int
    product_name: str
    price_cents: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    cart_id: str
    user_id: str
    status: str
    created_at: datetime
    updated_at: datetime
    items: List[CartItemOut]


class OkOut(BaseModel):
    ok: Literal[True] = True
