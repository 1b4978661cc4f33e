from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from storefront.domain.cart.aggregates import Cart, CartLine, new_line_id
from storefront.domain.cart.codec import decode_cart, encode_cart
from storefront.domain.catalog.models import Product
from storefront.domain.errors import (
    CartBusyError,
    InvalidQuantityError,
    PersistenceLoadError,
    PersistenceWriteError,
)
from storefront.persistence.slots import SlotStore

logger = logging.getLogger(__name__)

DEFAULT_CART_KEY = "shopping_cart"

T = TypeVar("T")


class CartStore:
    def __init__(self, slots: SlotStore, key: str = DEFAULT_CART_KEY):
        self.slots = slots
        self.key = key
        self._lock = threading.Lock()
        self._cart = self._restore()

    def _restore(self) -> Cart:
        try:
            raw = self.slots.get(self.key)
        except Exception as exc:
            logger.warning("cart slot=%s unreadable, starting empty: %s", self.key, exc)
            return Cart()
        if raw is None:
            return Cart()
        try:
            return decode_cart(raw, key=self.key)
        except PersistenceLoadError as exc:
            logger.warning("cart restore failed, starting empty: %s", exc)
            return Cart()

    def _persist(self) -> None:
        try:
            self.slots.set(self.key, encode_cart(self._cart))
        except Exception as exc:
            failure = PersistenceWriteError(self.key, str(exc))
            logger.warning("cart persisted state is stale: %s", failure)

    @contextmanager
    def _mutation(self) -> Iterator[Cart]:
        if not self._lock.acquire(blocking=False):
            raise CartBusyError()
        try:
            yield self._cart
            self._persist()
        finally:
            self._lock.release()

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty

    def lines(self) -> tuple[CartLine, ...]:
        with self._lock:
            return tuple(self._cart.lines)

    def snapshot(self) -> Cart:
        with self._lock:
            return self._cart.copy()

    def get_line(self, line_id: str) -> CartLine | None:
        return self._cart.find(line_id)

    def line_for_product(self, product_id: str) -> CartLine | None:
        return self._cart.find_product(product_id)

    def subtotal_quantity(self) -> int:
        return self._cart.item_count

    def add(self, product: Product, quantity: int = 1) -> CartLine:
        with self._mutation() as cart:
            line = cart.find_product(product.id)
            if line is None:
                if quantity <= 0:
                    raise InvalidQuantityError(quantity, product.id)
                line = CartLine(line_id=new_line_id(), product=product, quantity=quantity)
                cart.lines.append(line)
            else:
                updated = line.quantity + quantity
                if updated <= 0:
                    raise InvalidQuantityError(updated, product.id)
                line.quantity = updated
            return line

    def remove(self, line_id: str) -> None:
        with self._mutation() as cart:
            cart.lines = [line for line in cart.lines if line.line_id != line_id]

    def set_quantity(self, line_id: str, quantity: int) -> CartLine | None:
        with self._mutation() as cart:
            line = cart.find(line_id)
            if line is None:
                return None
            if quantity <= 0:
                cart.lines.remove(line)
                return None
            line.quantity = quantity
            return line

    def clear(self) -> None:
        with self._mutation() as cart:
            cart.lines.clear()

    def commit(self, build: Callable[[Cart], T]) -> T:
        """Run ``build`` on a detached copy of the cart, then empty the cart.

        The cart stays locked from the copy through the clear, so concurrent
        mutations fail with ``CartBusyError``. If ``build`` raises, the cart is
        left as it was.
        """
        with self._mutation() as cart:
            result = build(cart.copy())
            cart.lines.clear()
            return result
