# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.dependencies import get_cart_store
from storefront.data.catalog import get_product
from storefront.domain.entities import CartLine
from storefront.domain.schemas import CartLineOut, CartOut, ItemIn
from storefront.services.cart_service import CartStore

router = APIRouter(prefix="/cart", tags=["cart"])


def cart_out(cart: CartStore) -> CartOut:
    return CartOut(
        items=[CartLineOut.from_line(line) for line in cart.items()],
        total_count=cart.total_count(),
        total_price=cart.total_price(),
    )


def get_line(cart: CartStore, product_id: int, size: str) -> CartLine:
    line = cart.find(product_id, size)
    if not line:
        raise HTTPException(status_code=404, detail="Cart line not found")
    return line


@router.get("/", response_model=CartOut)
async def get_cart(cart: CartStore = Depends(get_cart_store)):
    return cart_out(cart)


@router.post("/items", response_model=CartOut)
async def add_item(payload: ItemIn, cart: CartStore = Depends(get_cart_store)):
    try:
        product = get_product(payload.product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if payload.size not in product.sizes:
        raise HTTPException(
            status_code=400,
            detail=f"Size {payload.size} is not available for product {product.id}",
        )

    cart.add_item(product, payload.size)
    return cart_out(cart)


@router.post("/items/{product_id}/{size}/increment", response_model=CartOut)
async def increment_item(
    product_id: int,
    size: str,
    cart: CartStore = Depends(get_cart_store),
):
    cart.increment(get_line(cart, product_id, size))
    return cart_out(cart)


@router.post("/items/{product_id}/{size}/decrement", response_model=CartOut)
async def decrement_item(
    product_id: int,
    size: str,
    cart: CartStore = Depends(get_cart_store),
):
    cart.decrement(get_line(cart, product_id, size))
    return cart_out(cart)


@router.delete("/items/{product_id}/{size}", response_model=CartOut)
async def remove_item(
    product_id: int,
    size: str,
    cart: CartStore = Depends(get_cart_store),
):
    line = cart.find(product_id, size)
    if line:
        cart.remove(line)
    return cart_out(cart)


@router.delete("/", response_model=CartOut)
async def clear_cart(cart: CartStore = Depends(get_cart_store)):
    cart.clear()
    return cart_out(cart)
