# storefront/services/favorites_service.py
from typing import Dict, Tuple

from storefront.data.catalog import Product, get_product
from storefront.services.notification_service import ChangeNotifier
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _resolve(product: Product | int) -> Product:
    """Produkt albo jego id z katalogu (bool to nie id)."""
    if isinstance(product, Product):
        return product
    if isinstance(product, bool) or not isinstance(product, int):
        raise TypeError(f"Expected Product or product id, got {type(product).__name__}")
    return get_product(product)


def _product_id(product: Product | int) -> int:
    if isinstance(product, Product):
        return product.id
    if isinstance(product, bool) or not isinstance(product, int):
        raise TypeError(f"Expected Product or product id, got {type(product).__name__}")
    return product


class FavoritesStore(ChangeNotifier):
    """Ulubione produkty, klucz = product id. Wszystkie metody przyjmuja Product albo id."""

    def __init__(self):
        super().__init__()
        self._items: Dict[int, Product] = {}

    def items(self) -> Tuple[Product, ...]:
        with self._lock:
            return tuple(self._items.values())

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def is_favorite(self, product: Product | int) -> bool:
        with self._lock:
            return _product_id(product) in self._items

    def toggle(self, product: Product | int) -> bool:
        """Zwraca True jesli produkt jest teraz w ulubionych."""
        product_id = _product_id(product)

        with self._mutation():
            if product_id in self._items:
                del self._items[product_id]
                liked = False
            else:
                # samo id rozwiazujemy przez katalog, nieznane id -> ValueError
                self._items[product_id] = _resolve(product)
                liked = True

        logger.info(f"Product {product_id} {'added to' if liked else 'removed from'} favorites")
        return liked

    def remove(self, product: Product | int) -> None:
        with self._mutation():
            self._items.pop(_product_id(product), None)

    def clear(self) -> None:
        with self._mutation():
            count = len(self._items)
            self._items.clear()

        logger.info(f"Favorites cleared ({count} products)")
