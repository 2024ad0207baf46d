"""
Products router: catalog queries and admin mutations.

- GET    /api/products                  - filtered, searched, sorted, paginated list
- GET    /api/products/categories/list  - distinct categories
- GET    /api/products/{product_id}     - one product
- POST   /api/products                  - create (admin)
- PUT    /api/products/{product_id}     - partial update (admin)
- DELETE /api/products/{product_id}     - delete (admin)

Every mutation rebuilds the catalog indexes and clears the response cache
before it returns.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from api.auth import AuthenticatedUser, require_admin
from api.deps import get_catalog, require_product_id
from api.schemas import (
    CategoryListResponse,
    MessageResponse,
    ProductListResponse,
    ProductMutationResponse,
)
from catalog.exceptions import ProductNotFoundError, ValidationFailedError
from catalog.models import ProductPublic
from catalog.store import CatalogIndex

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


def _validation_error(error: ValidationFailedError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "Validation failed", "details": error.errors},
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")


def _internal_error(action: str, error: Exception) -> HTTPException:
    logger.error("Unexpected error while %s: %s", action, error, exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="Search (substring match on name and description), filter by category, sort and paginate. "
                "Malformed page/limit/sort values fall back to defaults. Sets X-Total-Count.",
)
def list_products(
    response: Response,
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    limit: Optional[str] = Query(None, description="Page size, clamped to 1-100 (default 25)"),
    search: Optional[str] = Query(None, description="Substring to search for in name and description"),
    category: Optional[str] = Query(None, description="Exact category name"),
    sort_by: Optional[str] = Query(
        None, alias="sortBy",
        description="name, price, category, brand, stock, rating or createdAt (default name)",
    ),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc (default) or desc"),
    catalog: CatalogIndex = Depends(get_catalog),
) -> Dict[str, Any]:
    """
    List products.

    Example:
        ```bash
        GET /api/products?search=shoe&category=Clothing&sortBy=price&sortOrder=desc&page=2&limit=10
        ```
    """
    try:
        payload, headers = catalog.list_products(
            page=page,
            limit=limit,
            search=search,
            category=category,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except Exception as e:
        raise _internal_error("listing products", e) from e

    response.headers.update(headers)
    return payload


@router.get(
    "/categories/list",
    response_model=CategoryListResponse,
    summary="List product categories",
)
def list_categories(catalog: CatalogIndex = Depends(get_catalog)) -> CategoryListResponse:
    try:
        categories = catalog.list_categories()
    except Exception as e:
        raise _internal_error("listing categories", e) from e
    return CategoryListResponse(categories=categories, total=len(categories))


@router.get(
    "/{product_id}",
    response_model=ProductPublic,
    summary="Get a product by id",
)
def get_product(
    product_id: str = Depends(require_product_id),
    catalog: CatalogIndex = Depends(get_catalog),
) -> Dict[str, Any]:
    try:
        return catalog.get_product(product_id)
    except ProductNotFoundError as e:
        raise _not_found() from e
    except Exception as e:
        raise _internal_error(f"reading product {product_id}", e) from e


@router.post(
    "",
    response_model=ProductMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product (admin)",
)
def create_product(
    payload: Optional[Dict[str, Any]] = Body(None),
    admin: AuthenticatedUser = Depends(require_admin),
    catalog: CatalogIndex = Depends(get_catalog),
) -> Dict[str, Any]:
    """
    Create a product.

    Example:
        ```bash
        POST /api/products
        Header: Authorization: Bearer <admin token>
        Body: {"name": "Test Product", "price": 99.99, "category": "Electronics"}
        ```
    """
    try:
        product = catalog.create_product(payload or {})
    except ValidationFailedError as e:
        raise _validation_error(e) from e
    except Exception as e:
        raise _internal_error("creating a product", e) from e

    logger.info("Admin %s created product %s", admin.id, product["id"])
    return {"message": "Product created successfully", "product": product}


@router.put(
    "/{product_id}",
    response_model=ProductMutationResponse,
    summary="Update a product (admin)",
    description="Partial update: only the fields present in the body are changed.",
)
def update_product(
    admin: AuthenticatedUser = Depends(require_admin),
    product_id: str = Depends(require_product_id),
    payload: Optional[Dict[str, Any]] = Body(None),
    catalog: CatalogIndex = Depends(get_catalog),
) -> Dict[str, Any]:
    try:
        product = catalog.update_product(product_id, payload or {})
    except ValidationFailedError as e:
        raise _validation_error(e) from e
    except ProductNotFoundError as e:
        raise _not_found() from e
    except Exception as e:
        raise _internal_error(f"updating product {product_id}", e) from e

    logger.info("Admin %s updated product %s", admin.id, product_id)
    return {"message": "Product updated successfully", "product": product}


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product (admin)",
)
def delete_product(
    admin: AuthenticatedUser = Depends(require_admin),
    product_id: str = Depends(require_product_id),
    catalog: CatalogIndex = Depends(get_catalog),
) -> MessageResponse:
    try:
        catalog.delete_product(product_id)
    except ProductNotFoundError as e:
        raise _not_found() from e
    except Exception as e:
        raise _internal_error(f"deleting product {product_id}", e) from e

    logger.info("Admin %s deleted product %s", admin.id, product_id)
    return MessageResponse(message="Product deleted successfully")
