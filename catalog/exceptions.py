"""
Exceptions raised by the catalog core.

Index misses are not errors: an empty posting set is a valid "zero matches"
result and never raises.
"""

from typing import List


class CatalogError(Exception):
    """Base class for catalog errors."""


class ProductNotFoundError(CatalogError):
    """Raised when a product id is unknown on read, update or delete."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class ValidationFailedError(CatalogError):
    """Raised when a mutation payload violates field constraints."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Validation failed: " + "; ".join(self.errors))


class IndexIntegrityError(CatalogError):
    """
    Raised when a secondary index references an id missing from the primary index.

    This means a rebuild produced an inconsistent index set; query results
    can no longer be trusted.
    """


class CartItemNotFoundError(CatalogError):
    """Raised when a cart operation targets a product that is not in the cart."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Item not found in cart: {product_id}")
