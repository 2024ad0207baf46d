"""
Product and cart models for the catalog service.

# NOTE: Product is the internal record held by the catalog. It carries cost,
    supplier and admin-only fields that must never leave the service, plus the
    derived searchable_text used by the indexes. ProductPublic is the canonical
    response schema; every API response goes through Product.to_public().

Public field names follow the wire contract (createdAt is camelCase); models
are populated by field name internally and dumped by alias for responses.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ProductPublic(BaseModel):
    """
    Public product projection returned to clients.

    Excludes cost_price, supplier, internal_notes, admin_only and the derived
    searchable_text.
    """
    id: str = Field(..., description="Product identifier (decimal integer as string)")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    price: float = Field(..., gt=0, description="Selling price")
    category: str = Field(..., description="Category name")
    brand: str = Field("", description="Brand name")
    stock: int = Field(0, ge=0, description="Units in stock")
    rating: float = Field(0, ge=0, description="Average rating (0-5)")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    created_at: str = Field(..., alias="createdAt", description="Creation timestamp (ISO-8601)")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "42",
                "name": "Product 42",
                "description": "This is product number 42 with amazing features",
                "price": 129,
                "category": "Electronics",
                "brand": "BrandC",
                "stock": 17,
                "rating": 4.2,
                "tags": ["tag42", "feature2"],
                "createdAt": "2024-01-15T10:30:00.000Z",
            }
        },
    )


class Product(ProductPublic):
    """
    Internal product record.

    searchable_text is recomputed by the index builder on every rebuild;
    the identity fields (id, created_at) never change after creation.
    """
    # Internal-only data
    cost_price: Optional[float] = Field(None, ge=0, description="Purchase cost (internal)")
    supplier: str = Field("Unknown", description="Supplier name (internal)")
    internal_notes: str = Field("", description="Free-form notes (internal)")
    admin_only: bool = Field(False, description="Visible to administrators only (internal)")

    # Derived by the index builder
    searchable_text: str = Field("", description="normalize(name + ' ' + description)")

    def to_public(self) -> ProductPublic:
        """Project onto the public schema."""
        return ProductPublic(
            id=self.id,
            name=self.name,
            description=self.description,
            price=self.price,
            category=self.category,
            brand=self.brand,
            stock=self.stock,
            rating=self.rating,
            tags=list(self.tags),
            created_at=self.created_at,
        )

    def to_public_dict(self) -> Dict[str, Any]:
        """Public projection serialized for JSON responses."""
        return self.to_public().model_dump(mode="json", by_alias=True)


class CartItem(BaseModel):
    """A single line in a user's cart."""
    product_id: str = Field(..., description="Catalog product identifier")
    name: str = Field(..., description="Product name at the time it was added")
    price: float = Field(..., gt=0, description="Unit price at the time it was added")
    quantity: int = Field(1, ge=1, le=100, description="Quantity in cart")
    added_at: str = Field(default_factory=utc_now_iso, alias="addedAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def line_total(self) -> float:
        """Price times quantity."""
        return self.price * self.quantity


class Cart(BaseModel):
    """Shopping cart model."""
    items: Dict[str, CartItem] = Field(default_factory=dict, description="Cart lines keyed by product_id")
    updated_at: float = Field(default=0.0, description="Epoch seconds of the last change")

    model_config = ConfigDict(frozen=False)

    def add(self, item: CartItem) -> None:
        """Add a line or accumulate quantity onto an existing one."""
        existing = self.items.get(item.product_id)
        if existing is None:
            self.items[item.product_id] = item
            return
        existing.quantity += item.quantity
        existing.updated_at = utc_now_iso()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero removes the line."""
        if quantity == 0:
            self.items.pop(product_id, None)
            return
        line = self.items[product_id]
        line.quantity = quantity
        line.updated_at = utc_now_iso()

    def remove(self, product_id: str) -> Optional[CartItem]:
        return self.items.pop(product_id, None)

    def total(self) -> float:
        """Calculate total price of all lines in the cart."""
        return round(sum(item.line_total for item in self.items.values()), 2)

    def item_count(self) -> int:
        return len(self.items)
