# storefront/main.py
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from storefront.api.routers import carts, favorites, health, orders, products
from storefront.services.cart_service import CartStore
from storefront.services.favorites_service import FavoritesStore
from storefront.services.order_service import OrderStore
from storefront.tasks.scheduler import AsyncioScheduler, Scheduler
from storefront.utils.settings import HOST, PORT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(scheduler: Scheduler | None = None) -> FastAPI:
    """
    Store'y tworzone raz przy starcie aplikacji i zamykane przy wylaczeniu,
    zadnych globalnych singletonow.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cart_store = CartStore()
        favorites_store = FavoritesStore()
        order_store = OrderStore(
            scheduler or AsyncioScheduler(asyncio.get_running_loop())
        )

        app.state.cart_store = cart_store
        app.state.favorites_store = favorites_store
        app.state.order_store = order_store

        # licznik zamowien (badge) odswiezany przy kazdej zmianie statusu
        badge = order_store.subscribe(
            lambda: logger.info(f"Orders changed, {order_store.count()} placed")
        )
        logger.info("Stores initialized")

        try:
            yield
        finally:
            order_store.unsubscribe(badge)
            order_store.dispose()
            cart_store.dispose()
            favorites_store.dispose()
            logger.info("Stores disposed")

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(favorites.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
