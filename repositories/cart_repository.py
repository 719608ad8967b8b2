import time
from decimal import Decimal
from sqlalchemy import update, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.carts import Cart
from models.cart_items import CartItem
from utils.logger import get_logger, log_database_query

logger = get_logger(__name__)


class CartRepository:
    """
    Persistence for carts.

    Each write runs as a single transaction of conditional statements with
    the arithmetic done by the database (total_items = total_items + 1), so
    concurrent requests never overwrite each other with stale values read
    into Python. When a condition matches nothing the transaction is rolled
    back and the method returns None.
    """

    def __init__(self, db: Session):
        self.db = db

    # reads
    def find_by_id(self, cart_id: str) -> Cart | None:
        return self.db.get(Cart, cart_id)

    def find_by_user(self, user_id: str) -> Cart | None:
        return self.db.query(Cart).filter(Cart.user_id == user_id).one_or_none()

    # writes
    def create(self, user_id: str, product_id: str, price: Decimal) -> Cart:
        """New cart holding one unit of product_id."""
        start = time.perf_counter()
        cart = Cart(
            user_id=user_id,
            items=[CartItem(product_id=product_id, quantity=1)],
            total_items=1,
            total_price=price,
        )
        try:
            self.db.add(cart)
            self.db.commit()
        except SQLAlchemyError:
            self._rollback("INSERT", "carts")
            raise

        self.db.refresh(cart)
        log_database_query(logger, "INSERT", "carts", self._elapsed(start), rows_affected=1)
        return cart

    def increment_item(self, cart_id: str, product_id: str, quantity: int, price: Decimal) -> Cart | None:
        """
        Change a line item's quantity by `quantity` (negative to decrement)
        and move the cart totals by `quantity` items and `quantity * price`.

        The line must stay at quantity >= 1; use pull_item to drop it.
        Returns None if the cart does not hold the product (or the
        decrement would empty the line).
        """
        start = time.perf_counter()
        try:
            result = self.db.execute(
                update(CartItem)
                .where(
                    CartItem.cart_id == cart_id,
                    CartItem.product_id == product_id,
                    CartItem.quantity + quantity >= 1,
                )
                .values(quantity=CartItem.quantity + quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                return None

            if not self._move_totals(cart_id, quantity, price * quantity):
                self.db.rollback()
                return None

            self.db.commit()
        except SQLAlchemyError:
            self._rollback("UPDATE", "cart_items")
            raise

        log_database_query(logger, "UPDATE", "cart_items", self._elapsed(start), rows_affected=1)
        return self.find_by_id(cart_id)

    def add_item(self, cart_id: str, product_id: str, price: Decimal) -> Cart | None:
        """Append a new line {product_id, quantity: 1}. None if the cart is gone."""
        start = time.perf_counter()
        try:
            if not self._move_totals(cart_id, 1, price):
                self.db.rollback()
                return None

            self.db.add(CartItem(cart_id=cart_id, product_id=product_id, quantity=1))
            self.db.commit()
        except SQLAlchemyError:
            self._rollback("INSERT", "cart_items")
            raise

        log_database_query(logger, "INSERT", "cart_items", self._elapsed(start), rows_affected=1)
        return self.find_by_id(cart_id)

    def pull_item(self, cart_id: str, product_id: str, quantity: int, price: Decimal) -> Cart | None:
        """
        Remove the line {product_id, quantity} and take its contribution
        (`quantity` items, `quantity * price`) off the totals.

        The line is matched on its quantity as well, so a line that changed
        since it was read is left alone and None is returned.
        """
        start = time.perf_counter()
        try:
            result = self.db.execute(
                delete(CartItem).where(
                    CartItem.cart_id == cart_id,
                    CartItem.product_id == product_id,
                    CartItem.quantity == quantity,
                ).execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                return None

            if not self._move_totals(cart_id, -quantity, -(price * quantity)):
                self.db.rollback()
                return None

            self.db.commit()
        except SQLAlchemyError:
            self._rollback("DELETE", "cart_items")
            raise

        log_database_query(logger, "DELETE", "cart_items", self._elapsed(start), rows_affected=1)
        return self.find_by_id(cart_id)

    def clear(self, user_id: str) -> Cart | None:
        """Drop every line of the user's cart and zero its totals."""
        start = time.perf_counter()
        try:
            result = self.db.execute(
                update(Cart)
                .where(Cart.user_id == user_id)
                .values(total_items=0, total_price=0)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                return None

            removed = self.db.execute(
                delete(CartItem).where(
                    CartItem.cart_id.in_(select(Cart.id).where(Cart.user_id == user_id))
                ).execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self._rollback("DELETE", "cart_items")
            raise

        log_database_query(logger, "DELETE", "cart_items", self._elapsed(start), rows_affected=removed.rowcount)
        return self.find_by_user(user_id)

    # helpers
    def _move_totals(self, cart_id: str, items_delta: int, price_delta: Decimal) -> bool:
        result = self.db.execute(
            update(Cart)
            .where(Cart.id == cart_id)
            .values(
                total_items=Cart.total_items + items_delta,
                total_price=Cart.total_price + price_delta,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def _rollback(self, query_type: str, table: str):
        self.db.rollback()
        logger.error(
            f"{query_type} on {table} failed, transaction rolled back",
            extra={"query_type": query_type, "table": table},
            exc_info=True
        )

    @staticmethod
    def _elapsed(start: float) -> float:
        return (time.perf_counter() - start) * 1000
