"""
FastAPI dependencies giving routes access to the app-owned catalog and cart store.
"""

import re

from fastapi import HTTPException, Request, status

from catalog.cart import CartStore
from catalog.store import CatalogIndex

_PRODUCT_ID_RE = re.compile(r"[+-]?[0-9]+")


def get_catalog(request: Request) -> CatalogIndex:
    return request.app.state.catalog


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def is_valid_product_id(product_id) -> bool:
    """True for a decimal integer >= 1 (as int or string)."""
    text = str(product_id) if product_id is not None else ""
    return bool(_PRODUCT_ID_RE.fullmatch(text)) and int(text) >= 1


def require_product_id(product_id: str) -> str:
    """
    Validate a product id path parameter.

    Raises:
        HTTPException 400: If product_id is not a positive integer
    """
    if not is_valid_product_id(product_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid product ID",
        )
    return product_id
