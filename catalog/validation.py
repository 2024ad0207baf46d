"""
Validation and sanitization of untrusted product mutation payloads.

This is the boundary between request parsing and the catalog core: the core
only ever sees products built by build_new_product() / apply_product_update()
from payloads that passed validate_product_input().
"""

import html
import math
from typing import Any, Dict, List, Optional

from catalog.exceptions import ValidationFailedError
from catalog.models import Product, utc_now_iso

NAME_LENGTH = (2, 120)
DESCRIPTION_MAX_LENGTH = 500
CATEGORY_LENGTH = (2, 60)
BRAND_LENGTH = (2, 60)

# New products are booked at 70% of their selling price until purchasing says otherwise
DEFAULT_COST_RATIO = 0.7


def _to_number(value: Any) -> Optional[float]:
    """Parse an int, float or numeric string; None for anything else."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _length_between(value: Any, bounds: tuple) -> bool:
    low, high = bounds
    return low <= len(str(value)) <= high


def sanitize_text(value: Any) -> str:
    """Trim and HTML-escape a text field."""
    return html.escape(str(value if value is not None else "").strip(), quote=True)


def validate_product_input(data: Dict[str, Any], partial: bool = False) -> List[str]:
    """
    Check a create/update payload against the field constraints.

    With partial=True (updates) only the fields present in data are checked.

    Args:
        data: Decoded request body
        partial: Whether missing fields are allowed

    Returns:
        List of human-readable error messages (empty when valid)
    """
    errors: List[str] = []

    def checks(field: str) -> bool:
        return not partial or field in data

    if checks("name"):
        name = data.get("name")
        if not name or not _length_between(name, NAME_LENGTH):
            errors.append("Name must be between 2 and 120 characters.")

    if checks("description"):
        description = data.get("description")
        if description and len(str(description)) > DESCRIPTION_MAX_LENGTH:
            errors.append("Description must be 500 characters or less.")

    if checks("price"):
        price = _to_number(data.get("price"))
        if price is None or not math.isfinite(price) or price <= 0:
            errors.append("Price must be a positive number.")

    if checks("category"):
        category = data.get("category")
        if not category or not _length_between(category, CATEGORY_LENGTH):
            errors.append("Category must be between 2 and 60 characters.")

    if checks("brand"):
        brand = data.get("brand")
        if brand and not _length_between(brand, BRAND_LENGTH):
            errors.append("Brand must be between 2 and 60 characters.")

    if checks("stock"):
        stock = _to_number(data.get("stock") or 0)
        if stock is None or not math.isfinite(stock) or not stock.is_integer() or stock < 0:
            errors.append("Stock must be a non-negative integer.")

    if "tags" in data and not isinstance(data["tags"], list):
        errors.append("Tags must be an array of strings.")

    return errors


def ensure_valid_product_input(data: Dict[str, Any], partial: bool = False) -> None:
    """
    Raise ValidationFailedError if data violates any constraint.

    Raises:
        ValidationFailedError: With the list of per-field messages
    """
    errors = validate_product_input(data, partial=partial)
    if errors:
        raise ValidationFailedError(errors)


def _sanitize_tags(tags: Any) -> List[str]:
    return [sanitize_text(tag) for tag in tags] if isinstance(tags, list) else []


def build_new_product(product_id: str, data: Dict[str, Any]) -> Product:
    """
    Build a Product from a validated create payload.

    New products start unrated, with cost booked at DEFAULT_COST_RATIO of price
    and an unknown supplier.
    """
    price = _to_number(data["price"])
    return Product(
        id=product_id,
        name=sanitize_text(data.get("name")),
        description=sanitize_text(data.get("description") or ""),
        price=price,
        category=sanitize_text(data.get("category")),
        brand=sanitize_text(data.get("brand") or ""),
        stock=int(_to_number(data.get("stock") or 0)),
        rating=0,
        tags=_sanitize_tags(data.get("tags")),
        created_at=utc_now_iso(),
        cost_price=round(price * DEFAULT_COST_RATIO, 2),
        supplier="Unknown",
        internal_notes="",
        admin_only=False,
    )


def apply_product_update(product: Product, data: Dict[str, Any]) -> Product:
    """
    Return a copy of product with the fields present in a validated update payload replaced.

    id and created_at are never changed.
    """
    changes: Dict[str, Any] = {}
    if "name" in data:
        changes["name"] = sanitize_text(data["name"])
    if "description" in data:
        changes["description"] = sanitize_text(data["description"] or "")
    if "price" in data:
        changes["price"] = _to_number(data["price"])
    if "category" in data:
        changes["category"] = sanitize_text(data["category"])
    if "brand" in data:
        changes["brand"] = sanitize_text(data["brand"] or "")
    if "stock" in data:
        changes["stock"] = int(_to_number(data["stock"] or 0))
    if "tags" in data:
        changes["tags"] = _sanitize_tags(data["tags"])
    return product.model_copy(update=changes, deep=True)
