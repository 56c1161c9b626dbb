# cart_service/repos/cart_repo.py
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Tuple

from sqlalchemy import delete, select, text, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from cart_service.data.models.cart import CartModel, new_id, utcnow
from cart_service.data.models.cart_item import CartItemModel
from cart_service.data.models.product import ProductModel
from cart_service.domain.exceptions import PersistenceError, StorageTimeoutError, ValidationError
from cart_service.utils.logging import get_logger

logger = get_logger(__name__)

#postgres SQLSTATE for a statement cancelled by statement_timeout
_QUERY_CANCELED = "57014"

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass(slots=True)
class CartRow:
    item_id: str
    product_id: str
    quantity: int
    product_name: str
    price_cents: int
    created_at: datetime
    updated_at: datetime


def _is_timeout(exc: SQLAlchemyError) -> bool:
    if not isinstance(exc, DBAPIError):
        return False
    return getattr(exc.orig, "pgcode", None) == _QUERY_CANCELED


def _check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity must be > 0")


def _cart_rows(cart_id: str):
    return (
        select(
            CartItemModel.id,
            CartItemModel.product_id,
            CartItemModel.quantity,
            ProductModel.name,
            ProductModel.price_cents,
            CartItemModel.created_at,
            CartItemModel.updated_at,
        )
        .join(ProductModel, ProductModel.id == CartItemModel.product_id)
        .where(CartItemModel.cart_id == cart_id)
        .order_by(CartItemModel.created_at.asc())
    )


def _cart_with_rows(cart_id: str):
    lines = (
        select(
            CartItemModel.cart_id,
            CartItemModel.id.label("item_id"),
            CartItemModel.product_id,
            CartItemModel.quantity,
            ProductModel.name.label("product_name"),
            ProductModel.price_cents,
            CartItemModel.created_at,
            CartItemModel.updated_at,
        )
        .join(ProductModel, ProductModel.id == CartItemModel.product_id)
        .where(CartItemModel.cart_id == cart_id)
        .subquery()
    )
    return (
        select(
            CartModel,
            lines.c.item_id,
            lines.c.product_id,
            lines.c.quantity,
            lines.c.product_name,
            lines.c.price_cents,
            lines.c.created_at,
            lines.c.updated_at,
        )
        .outerjoin(lines, lines.c.cart_id == CartModel.id)
        .where(CartModel.id == cart_id)
        .order_by(lines.c.created_at.asc())
        .execution_options(populate_existing=True)
    )


class CartRepo:
    """
    Persistent carts and cart items.

    Every public method is one transaction: it commits on success and rolls
    back on any failure, so multi-step operations never leave partial state.
    Storage failures come out as PersistenceError.
    """

    def __init__(self, db: Session, timeout: float = 3.0):
        self.db = db
        self.timeout = timeout

    @contextmanager
    def _transaction(self, operation: str, timeout: float | None = None) -> Iterator[Session]:
        try:
            self._apply_timeout(timeout if timeout is not None else self.timeout)
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{operation} failed: {e}")
            if _is_timeout(e):
                raise StorageTimeoutError(f"{operation} timed out") from e
            raise PersistenceError(f"{operation} failed") from e
        except Exception:
            self.db.rollback()
            raise

    def _dialect(self) -> str:
        return self.db.get_bind().dialect.name

    def _apply_timeout(self, timeout: float) -> None:
        # SET LOCAL only lives until the end of the current transaction
        if self._dialect() == "postgresql":
            ms = max(1, int(timeout * 1000))
            self.db.execute(text(f"SET LOCAL statement_timeout = {ms}"))

    def _touch_cart(self, cart_id: str, now: datetime) -> None:
        self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id)
            .values(updated_at=now)
            .execution_options(synchronize_session=False)
        )

    def create_cart(self, user_id: str, timeout: float | None = None) -> str:
        with self._transaction("create_cart", timeout) as db:
            now = utcnow()
            cart = CartModel(user_id=user_id, status="ACTIVE", created_at=now, updated_at=now)
            db.add(cart)
            db.flush()
            cart_id = cart.id
        return cart_id

    def get_cart_header(self, cart_id: str, timeout: float | None = None) -> CartModel | None:
        with self._transaction("get_cart_header", timeout) as db:
            cart = db.get(CartModel, cart_id, populate_existing=True)
        return cart

    def add_item(self, cart_id: str, product_id: str, quantity: int, timeout: float | None = None) -> None:
        _check_quantity(quantity)

        dialect = self._dialect()
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise PersistenceError(f"Upsert is not supported on {dialect}")

        with self._transaction("add_item", timeout) as db:
            now = utcnow()
            stmt = insert(CartItemModel).values(
                id=new_id(),
                cart_id=cart_id,
                product_id=product_id,
                quantity=quantity,
                created_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[CartItemModel.cart_id, CartItemModel.product_id],
                set_={
                    "quantity": CartItemModel.quantity + stmt.excluded.quantity,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            db.execute(stmt)
            self._touch_cart(cart_id, now)

    def decrease_item(self, cart_id: str, product_id: str, quantity: int, timeout: float | None = None) -> None:
        _check_quantity(quantity)

        pair = (CartItemModel.cart_id == cart_id, CartItemModel.product_id == product_id)

        with self._transaction("decrease_item", timeout) as db:
            now = utcnow()
            # rows that would reach zero go first, so no row is ever stored at 0
            pruned = db.execute(
                delete(CartItemModel)
                .where(*pair, CartItemModel.quantity <= quantity)
                .execution_options(synchronize_session=False)
            )
            decreased = db.execute(
                update(CartItemModel)
                .where(*pair)
                .values(quantity=CartItemModel.quantity - quantity, updated_at=now)
                .execution_options(synchronize_session=False)
            )

            if pruned.rowcount or decreased.rowcount:
                self._touch_cart(cart_id, now)

    def remove_item(self, cart_id: str, product_id: str, timeout: float | None = None) -> None:
        with self._transaction("remove_item", timeout) as db:
            result = db.execute(
                delete(CartItemModel)
                .where(CartItemModel.cart_id == cart_id, CartItemModel.product_id == product_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                self._touch_cart(cart_id, utcnow())

    def empty_cart(self, cart_id: str, timeout: float | None = None) -> None:
        with self._transaction("empty_cart", timeout) as db:
            db.execute(
                delete(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .execution_options(synchronize_session=False)
            )
            self._touch_cart(cart_id, utcnow())

    def get_cart(self, cart_id: str, timeout: float | None = None) -> List[CartRow]:
        """
        Items of a cart joined with the catalog, oldest first.

        A missing cart and an empty cart both give an empty list.
        """
        with self._transaction("get_cart", timeout) as db:
            rows = db.execute(_cart_rows(cart_id)).all()

        return [CartRow(*row) for row in rows]

    def get_cart_with_items(
        self, cart_id: str, timeout: float | None = None
    ) -> Tuple[CartModel | None, List[CartRow]]:
        """
        Cart header and its rows from a single statement, so both come from
        the same snapshot. A missing cart gives (None, []).
        """
        with self._transaction("get_cart_with_items", timeout) as db:
            rows = db.execute(_cart_with_rows(cart_id)).all()

        if not rows:
            return None, []

        cart = rows[0][0]
        # outer join: an empty cart comes back as one row with no item columns
        items = [CartRow(*row[1:]) for row in rows if row[1] is not None]
        return cart, items
