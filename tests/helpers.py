"""
Test data builders shared across test modules.
"""

from typing import List, Optional

from catalog.models import Product


def make_product(
    product_id: str,
    name: str,
    price: float = 10.0,
    category: str = "Clothing",
    description: str = "",
    **extra,
) -> Product:
    """Build an internal Product with sensible defaults for tests."""
    fields = dict(
        id=product_id,
        name=name,
        description=description,
        price=price,
        category=category,
        brand="BrandA",
        stock=5,
        rating=4.0,
        tags=["tag"],
        created_at="2024-01-01T00:00:00.000Z",
        cost_price=round(price * 0.5, 2),
        supplier="Supplier 1",
        internal_notes="secret notes",
        admin_only=False,
    )
    fields.update(extra)
    return Product(**fields)


def shoe_products() -> List[Product]:
    return [
        make_product("1", "Red Shoe", price=50.0, category="Clothing"),
        make_product("2", "Blue Shoe", price=30.0, category="Clothing"),
        make_product("3", "Red Hat", price=30.0, category="Accessories"),
    ]


def numbered_products(count: int, category: str = "Books", price: Optional[float] = None) -> List[Product]:
    """count products named 'Item 001'.. so that name order equals id order."""
    return [
        make_product(str(i), f"Item {i:03d}", price=price or float(i), category=category)
        for i in range(1, count + 1)
    ]


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
