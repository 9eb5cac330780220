# storefront/domain/entities.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from storefront.data.catalog import Product

LineKey = Tuple[int, str]


class OrderStatus(str, Enum):
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"

    @property
    def next_status(self) -> Optional["OrderStatus"]:
        """Nastepny status w cyklu zycia, None dla stanu koncowego."""
        members = list(OrderStatus)
        idx = members.index(self)
        if idx + 1 < len(members):
            return members[idx + 1]
        return None

    @property
    def is_terminal(self) -> bool:
        return self.next_status is None


@dataclass(frozen=True)
class CartLine:
    """
    Pozycja w koszyku (produkt + rozmiar + ilosc).
    Store wydaje tylko takie zamrozone kopie, ilosc zmienia sie
    przez podmiane wpisu w samym store.
    """

    product: Product
    size: str
    quantity: int = 1

    @property
    def key(self) -> LineKey:
        return (self.product.id, self.size)

    @property
    def subtotal(self) -> int:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class OrderLine:
    """Snapshot pozycji w momencie zakupu."""

    product: Product
    size: str
    quantity: int

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderLine":
        return cls(product=line.product, size=line.size, quantity=line.quantity)

    @property
    def subtotal(self) -> int:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class Order:
    id: str
    created_at: datetime
    lines: Tuple[OrderLine, ...]
    total_price: int
    status: OrderStatus = OrderStatus.PROCESSING
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def reached_at(self, status: OrderStatus) -> Optional[datetime]:
        if status is OrderStatus.PROCESSING:
            return self.created_at
        if status is OrderStatus.SHIPPED:
            return self.shipped_at
        return self.delivered_at
