"""
Pydantic schemas for FastAPI request and response models.

The schemas include:
- Pagination / ProductListResponse: GET /api/products
- CategoryListResponse: GET /api/products/categories/list
- ProductMutationResponse / MessageResponse: product create/update/delete
- CartItemInput / CartItemUpdate: cart request bodies
- CartView / CartResponse: cart responses

# NOTE: Products are always serialized through catalog.models.ProductPublic so
    that internal fields (cost_price, supplier, ...) can never leak.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from catalog.models import Cart, ProductPublic


class Pagination(BaseModel):
    """Pagination metadata for product list responses."""
    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_items: int = Field(..., alias="totalItems")
    items_per_page: int = Field(..., alias="itemsPerPage")
    next_page: Optional[str] = Field(None, alias="nextPage", description="Link to the next page, null on the last page")
    prev_page: Optional[str] = Field(None, alias="prevPage", description="Link to the previous page, null on the first page")

    model_config = ConfigDict(populate_by_name=True)


class ProductListResponse(BaseModel):
    """One page of products plus pagination metadata."""
    products: List[ProductPublic] = Field(..., description="Products on this page")
    pagination: Pagination

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "products": [ProductPublic.model_config["json_schema_extra"]["example"]],
                "pagination": {
                    "currentPage": 1,
                    "totalPages": 40,
                    "totalItems": 1000,
                    "itemsPerPage": 25,
                    "nextPage": "/api/products?page=2&limit=25&search=&category=&sortBy=name&sortOrder=asc",
                    "prevPage": None,
                },
            }
        }
    )


class CategoryListResponse(BaseModel):
    categories: List[str] = Field(..., description="Distinct category names, sorted")
    total: int


class ProductMutationResponse(BaseModel):
    message: str
    product: ProductPublic


class MessageResponse(BaseModel):
    message: str


class CartItemInput(BaseModel):
    """
    Body for adding a product to the cart.

    Fields accept any value; the route reports bad values as 400 with a
    readable message instead of a schema error.
    """
    product_id: Optional[Union[int, str]] = Field(None, alias="productId")
    quantity: Optional[Any] = Field(1, description="Integer between 1 and 100")

    model_config = ConfigDict(populate_by_name=True)


class CartItemUpdate(BaseModel):
    """Body for setting a cart line's quantity (0 removes the line)."""
    product_id: Optional[Union[int, str]] = Field(None, alias="productId")
    quantity: Optional[Any] = Field(None, description="Integer between 0 and 100")

    model_config = ConfigDict(populate_by_name=True)


class CartItemOut(BaseModel):
    product_id: str = Field(..., alias="productId")
    name: str
    price: float
    quantity: int
    line_total: float = Field(..., alias="lineTotal")
    added_at: str = Field(..., alias="addedAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class CartView(BaseModel):
    items: List[CartItemOut] = Field(default_factory=list)
    total: float = Field(0.0, description="Sum of line totals")
    updated_at: float = Field(..., alias="updatedAt", description="Epoch seconds of the last change")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartView":
        return cls(
            items=[
                CartItemOut(
                    product_id=item.product_id,
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                    line_total=round(item.line_total, 2),
                    added_at=item.added_at,
                    updated_at=item.updated_at,
                )
                for item in cart.items.values()
            ],
            total=cart.total(),
            updated_at=cart.updated_at,
        )


class CartMetadata(BaseModel):
    last_updated: str = Field(..., alias="lastUpdated")
    item_count: int = Field(..., alias="itemCount")

    model_config = ConfigDict(populate_by_name=True)


class CartResponse(BaseModel):
    """Response for GET /api/cart."""
    cart: CartView
    metadata: CartMetadata


class CartMutationResponse(BaseModel):
    """Response for cart add/update/remove."""
    message: str
    cart: CartView
    added_item: Optional[Dict[str, Any]] = Field(None, alias="addedItem")
    removed_item: Optional[CartItemOut] = Field(None, alias="removedItem")

    model_config = ConfigDict(populate_by_name=True)
