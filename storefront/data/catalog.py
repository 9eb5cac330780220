# storefront/data/catalog.py
from dataclasses import dataclass
from typing import Dict, List, Tuple

DEFAULT_SIZES: Tuple[str, ...] = ("One Size",)

CATEGORY_SIZES: Dict[str, Tuple[str, ...]] = {
    "Clothing": ("XS", "S", "M", "L", "XL", "XXL"),
    "Shoes": ("36", "37", "38", "39", "40", "41", "42", "43", "44"),
    "Accessories": ("One Size",),
}


def sizes_for(category: str) -> Tuple[str, ...]:
    """Rozmiary dostepne dla kategorii, nieznana kategoria -> One Size."""
    return CATEGORY_SIZES.get(category, DEFAULT_SIZES)


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: int  # w groszach/tiynach, nigdy sformatowany string
    image_url: str
    description: str
    category: str

    @property
    def sizes(self) -> Tuple[str, ...]:
        return sizes_for(self.category)


DEMO_PRODUCTS: Tuple[Product, ...] = (
    Product(
        id=1,
        name="Product #1",
        price=1200_00,
        image_url="https://picsum.photos/400/600?random=1",
        description="A stylish, high quality item. Perfect for everyday use.",
        category="Clothing",
    ),
    Product(
        id=2,
        name="Product #2",
        price=2400_00,
        image_url="https://picsum.photos/400/600?random=2",
        description="A premium item from the new collection. Modern design and great quality.",
        category="Shoes",
    ),
    Product(
        id=3,
        name="Product #3",
        price=3600_00,
        image_url="https://picsum.photos/400/600?random=3",
        description="An exclusive limited series item. A great choice for special occasions.",
        category="Accessories",
    ),
    Product(
        id=4,
        name="Product #4",
        price=4800_00,
        image_url="https://picsum.photos/400/600?random=4",
        description="The trending item of the season. Combines comfort and style.",
        category="Clothing",
    ),
)

_BY_ID: Dict[int, Product] = {p.id: p for p in DEMO_PRODUCTS}


def list_products() -> List[Product]:
    return list(DEMO_PRODUCTS)


def get_product(product_id: int) -> Product:
    product = _BY_ID.get(product_id)
    if not product:
        raise ValueError("Product not found")
    return product
