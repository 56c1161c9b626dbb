#cart_service/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from cart_service.data.database import get_db
from cart_service.domain.exceptions import (
    CartNotFoundError,
    CartServiceError,
    StorageTimeoutError,
    ValidationError,
)
from cart_service.domain.schemas import (
    CartOut,
    CreateCartIn,
    CreateCartOut,
    DecreaseIn,
    ItemIn,
    OkOut,
)
from cart_service.repos.cart_repo import CartRepo
from cart_service.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(request: Request, db: Session = Depends(get_db)) -> CartService:
    settings = request.app.state.settings
    return CartService(CartRepo(db, timeout=settings.db_timeout_seconds))


def _to_http(e: CartServiceError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if isinstance(e, CartNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, StorageTimeoutError):
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


# cart level

@router.post("", response_model=CreateCartOut, status_code=status.HTTP_201_CREATED)
def create_cart(payload: CreateCartIn, svc: CartService = Depends(get_service)):
    try:
        return {"cart_id": svc.create_cart(payload.user_id)}
    except CartServiceError as e:
        raise _to_http(e)


@router.get("/{cart_id}", response_model=CartOut)
def view_cart(cart_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.view_cart(cart_id)
    except CartServiceError as e:
        raise _to_http(e)


@router.delete("/{cart_id}/items", response_model=OkOut)
def empty_cart(cart_id: str, svc: CartService = Depends(get_service)):
    try:
        svc.empty_cart(cart_id)
    except CartServiceError as e:
        raise _to_http(e)
    return OkOut()


# item level

@router.post("/{cart_id}/items", response_model=OkOut)
def add_item(cart_id: str, payload: ItemIn, svc: CartService = Depends(get_service)):
    try:
        svc.add_item(cart_id, payload.product_id, payload.quantity)
    except CartServiceError as e:
        raise _to_http(e)
    return OkOut()


@router.patch("/{cart_id}/items/{product_id}", response_model=OkOut)
def decrease_item(
    cart_id: str,
    product_id: str,
    payload: DecreaseIn,
    svc: CartService = Depends(get_service),
):
    try:
        svc.decrease_item(cart_id, product_id, payload.quantity)
    except CartServiceError as e:
        raise _to_http(e)
    return OkOut()


@router.delete("/{cart_id}/items/{product_id}", response_model=OkOut)
def remove_item(cart_id: str, product_id: str, svc: CartService = Depends(get_service)):
    try:
        svc.remove_item(cart_id, product_id)
    except CartServiceError as e:
        raise _to_http(e)
    return OkOut()
