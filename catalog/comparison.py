"""
Sorting and pagination utilities for product lists.

Key functions:
- sort_products: Stable single-key sort over the allowed sort fields
- paginate: Slice one page and compute the page count
- build_pagination: Pagination metadata with next/previous page links
"""

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from catalog.models import Product
from catalog.query import ALLOWED_SORT_FIELDS, DEFAULT_SORT_FIELD, ListQuery

# Wire sort field -> Product attribute
SORT_ATTRIBUTES = {
    "name": "name",
    "price": "price",
    "category": "category",
    "brand": "brand",
    "stock": "stock",
    "rating": "rating",
    "createdAt": "created_at",
}

PRODUCTS_PATH = "/api/products"


def sort_products(products: Sequence[Product], sort_by: str = DEFAULT_SORT_FIELD, sort_order: str = "asc") -> List[Product]:
    """
    Sort products by one field, keeping equal-key products in their input order.

    Python's sort is stable in both directions (reverse=True does not reorder
    equal keys), so repeated identical queries always paginate identically.

    Args:
        products: Products in pre-sort (catalog) order
        sort_by: One of ALLOWED_SORT_FIELDS; anything else sorts by name
        sort_order: "desc" for descending, anything else ascending

    Returns:
        New sorted list. Input is not mutated.

    Examples:
        >>> [p.id for p in sort_products(products, "price")]
        ['2', '1', '3']
    """
    if len(products) <= 1:
        return list(products)

    if sort_by not in ALLOWED_SORT_FIELDS:
        sort_by = DEFAULT_SORT_FIELD
    attribute = SORT_ATTRIBUTES[sort_by]

    return sorted(products, key=lambda p: getattr(p, attribute), reverse=(sort_order == "desc"))


def paginate(products: Sequence[Product], page: int, limit: int) -> Tuple[List[Product], int]:
    """
    Slice one page of results.

    Out-of-range pages produce an empty slice rather than an error.

    Returns:
        (page_items, total_pages)
    """
    total_pages = math.ceil(len(products) / limit) if limit > 0 else 0
    start = (page - 1) * limit
    return list(products[start:start + limit]), total_pages


def _page_link(base_url: str, query: ListQuery, page: int) -> str:
    params = query.as_params()
    params["page"] = page
    return f"{base_url.rstrip('/')}{PRODUCTS_PATH}?{urlencode(params)}"


def build_pagination(query: ListQuery, total_items: int, total_pages: int, base_url: str = "") -> Dict[str, Any]:
    """
    Pagination metadata for a list response.

    nextPage / prevPage are absolute links when base_url is configured,
    path-relative otherwise, and None at the boundaries.
    """
    next_page: Optional[str] = None
    prev_page: Optional[str] = None
    if query.page < total_pages:
        next_page = _page_link(base_url, query, query.page + 1)
    if query.page > 1:
        prev_page = _page_link(base_url, query, query.page - 1)

    return {
        "currentPage": query.page,
        "totalPages": total_pages,
        "totalItems": total_items,
        "itemsPerPage": query.limit,
        "nextPage": next_page,
        "prevPage": prev_page,
    }
