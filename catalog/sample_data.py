"""
Synthetic catalog data used to seed an empty catalog.
"""

import random
from typing import List, Optional

from catalog.models import Product, utc_now_iso

CATEGORIES = ["Electronics", "Clothing", "Books", "Home", "Sports", "Beauty"]
BRANDS = ["BrandA", "BrandB", "BrandC", "BrandD", "BrandE"]


def generate_products(count: int, seed: Optional[int] = None) -> List[Product]:
    """
    Generate count products with ids "1".."count".

    Args:
        count: Number of products
        seed: Optional random seed for reproducible catalogs

    Returns:
        List of Product objects in id order
    """
    rng = random.Random(seed)
    created_at = utc_now_iso()
    products: List[Product] = []
    for i in range(1, count + 1):
        products.append(
            Product(
                id=str(i),
                name=f"Product {i}",
                description=f"This is product number {i} with amazing features",
                price=rng.randint(10, 1009),
                category=rng.choice(CATEGORIES),
                brand=rng.choice(BRANDS),
                stock=rng.randint(0, 99),
                rating=round(rng.random() * 5, 1),
                tags=[f"tag{i}", f"feature{i % 10}"],
                created_at=created_at,
                cost_price=rng.randint(5, 504),
                supplier=f"Supplier {i % 20}",
                internal_notes=f"Internal notes for product {i}",
                admin_only=rng.random() > 0.9,
            )
        )
    return products
