# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, HTTPException

from storefront.data.catalog import get_product, list_products
from storefront.domain.schemas import ProductOut

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=List[ProductOut])
async def get_products():
    return [ProductOut.model_validate(p) for p in list_products()]


@router.get("/{product_id}", response_model=ProductOut)
async def get_one_product(product_id: int):
    try:
        return ProductOut.model_validate(get_product(product_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
