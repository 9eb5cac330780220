# storefront/api/routers/favorites.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.dependencies import get_favorites_store
from storefront.data.catalog import get_product
from storefront.domain.schemas import FavoritesOut, ProductOut, ToggleOut
from storefront.services.favorites_service import FavoritesStore

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("/", response_model=FavoritesOut)
async def get_favorites(favorites: FavoritesStore = Depends(get_favorites_store)):
    return FavoritesOut(
        items=[ProductOut.model_validate(p) for p in favorites.items()],
        count=favorites.count(),
    )


@router.post("/{product_id}/toggle", response_model=ToggleOut)
async def toggle_favorite(
    product_id: int,
    favorites: FavoritesStore = Depends(get_favorites_store),
):
    try:
        product = get_product(product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ToggleOut(product_id=product.id, is_favorite=favorites.toggle(product))


@router.delete("/{product_id}", response_model=FavoritesOut)
async def remove_favorite(
    product_id: int,
    favorites: FavoritesStore = Depends(get_favorites_store),
):
    favorites.remove(product_id)
    return await get_favorites(favorites)


@router.delete("/", response_model=FavoritesOut)
async def clear_favorites(favorites: FavoritesStore = Depends(get_favorites_store)):
    favorites.clear()
    return await get_favorites(favorites)
