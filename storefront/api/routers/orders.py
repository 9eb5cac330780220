# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.dependencies import get_cart_store, get_order_store
from storefront.domain.schemas import OrderOut, OrdersOut
from storefront.services.cart_service import CartStore
from storefront.services.order_service import OrderStore

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderOut, status_code=201)
async def create_order(
    cart: CartStore = Depends(get_cart_store),
    orders: OrderStore = Depends(get_order_store),
):
    """
    Checkout: tworzy zamowienie z aktualnej zawartosci koszyka,
    potem czysci koszyk (OrderStore koszyka nie dotyka).
    """
    if cart.is_empty():
        raise HTTPException(status_code=400, detail="Cart is empty")

    order = orders.place(cart.items(), cart.total_price())
    cart.clear()
    return OrderOut.from_order(order)


@router.get("/", response_model=OrdersOut)
async def list_orders(orders: OrderStore = Depends(get_order_store)):
    return OrdersOut(
        orders=[OrderOut.from_order(o) for o in orders.orders()],
        count=orders.count(),
    )


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: str, orders: OrderStore = Depends(get_order_store)):
    order = orders.get(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderOut.from_order(order)
