# storefront/services/cart_service.py
from dataclasses import replace
from typing import Dict, Tuple

from storefront.data.catalog import Product
from storefront.domain.entities import CartLine, LineKey
from storefront.services.notification_service import ChangeNotifier
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartStore(ChangeNotifier):
    """
    Koszyk w pamieci procesu.
    commands (add, increment, decrement, remove, clear) zmieniaja stan i robia broadcast
    query (items, find, total_*) tylko odczyt
    """

    def __init__(self):
        super().__init__()
        # jedna linia na (product_id, size), kolejnosc = kolejnosc dodania
        self._lines: Dict[LineKey, CartLine] = {}

    # query - odczyt
    def items(self) -> Tuple[CartLine, ...]:
        with self._lock:
            return tuple(self._lines.values())

    def find(self, product_id: int, size: str) -> CartLine | None:
        with self._lock:
            return self._lines.get((product_id, size))

    def total_count(self) -> int:
        with self._lock:
            return sum(line.quantity for line in self._lines.values())

    def total_price(self) -> int:
        with self._lock:
            return sum(line.subtotal for line in self._lines.values())

    def is_empty(self) -> bool:
        with self._lock:
            return not self._lines

    # commands
    def add_item(self, product: Product, size: str) -> CartLine:
        key = (product.id, size)

        with self._mutation():
            existing = self._lines.get(key)

            if existing:
                line = replace(existing, quantity=existing.quantity + 1)
                logger.info(
                    f"Product {product.id} ({size}) already in cart, quantity "
                    f"{existing.quantity} -> {line.quantity}"
                )
            else:
                line = CartLine(product=product, size=size, quantity=1)
                logger.info(f"Added product {product.id} ({size}) to cart")

            self._lines[key] = line

        return line

    def increment(self, line: CartLine) -> CartLine | None:
        with self._mutation():
            current = self._lines.get(line.key)
            if not current:
                return None

            updated = replace(current, quantity=current.quantity + 1)
            self._lines[line.key] = updated

        return updated

    def decrement(self, line: CartLine) -> CartLine | None:
        """Zwraca nowa linie albo None, jesli linia zniknela z koszyka."""
        with self._mutation():
            current = self._lines.get(line.key)
            if not current:
                return None

            if current.quantity > 1:
                updated = replace(current, quantity=current.quantity - 1)
                self._lines[line.key] = updated
            else:
                # ilosc nigdy nie spada do 0, linia po prostu znika
                del self._lines[line.key]
                updated = None
                logger.info(f"Removed product {line.product.id} ({line.size}) from cart")

        return updated

    def remove(self, line: CartLine) -> None:
        with self._mutation():
            if self._lines.pop(line.key, None):
                logger.info(f"Removed product {line.product.id} ({line.size}) from cart")

    def clear(self) -> None:
        with self._mutation():
            count = len(self._lines)
            self._lines.clear()

        logger.info(f"Cart cleared ({count} lines)")
