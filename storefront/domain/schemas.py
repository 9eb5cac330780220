# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime

from storefront.domain.entities import CartLine, Order, OrderLine, OrderStatus


class ProductOut(BaseModel):
    """Schema dla produktu (response). Cena w jednostkach minor."""

    id: int
    name: str
    price: int
    image_url: str
    description: str
    category: str
    sizes: List[str]

    model_config = ConfigDict(from_attributes=True)


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    size: str = Field(..., min_length=1, description="Rozmiar z listy rozmiarow produktu")


class CartLineOut(BaseModel):
    product_id: int
    name: str
    size: str
    quantity: int
    price: int
    subtotal: int

    @classmethod
    def from_line(cls, line: CartLine | OrderLine) -> "CartLineOut":
        return cls(
            product_id=line.product.id,
            name=line.product.name,
            size=line.size,
            quantity=line.quantity,
            price=line.product.price,
            subtotal=line.subtotal,
        )


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    items: List[CartLineOut]
    total_count: int
    total_price: int


class FavoritesOut(BaseModel):
    items: List[ProductOut]
    count: int


class ToggleOut(BaseModel):
    product_id: int
    is_favorite: bool


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: str
    created_at: datetime
    items: List[CartLineOut]
    total_price: int
    status: OrderStatus
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderOut":
        return cls(
            id=order.id,
            created_at=order.created_at,
            items=[CartLineOut.from_line(line) for line in order.lines],
            total_price=order.total_price,
            status=order.status,
            shipped_at=order.shipped_at,
            delivered_at=order.delivered_at,
        )


class OrdersOut(BaseModel):
    orders: List[OrderOut]
    count: int
