# storefront/api/dependencies.py
from fastapi import Request

from storefront.services.cart_service import CartStore
from storefront.services.favorites_service import FavoritesStore
from storefront.services.order_service import OrderStore


# store'y zyja na app.state, tworzone w lifespan aplikacji
def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_favorites_store(request: Request) -> FavoritesStore:
    return request.app.state.favorites_store


def get_order_store(request: Request) -> OrderStore:
    return request.app.state.order_store
