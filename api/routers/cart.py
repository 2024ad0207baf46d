"""
Cart router: per-user shopping carts.

All endpoints require a bearer token; the cart belongs to the token's user.

- GET    /api/cart                    - view cart (sets X-Cart-Items)
- POST   /api/cart                    - add {productId, quantity=1}
- PUT    /api/cart                    - set {productId, quantity}; 0 removes the line
- DELETE /api/cart?productId=<id>     - remove a line
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from api.auth import AuthenticatedUser, authenticate
from api.deps import get_cart_store, is_valid_product_id
from api.schemas import (
    CartItemInput,
    CartItemOut,
    CartItemUpdate,
    CartMetadata,
    CartMutationResponse,
    CartResponse,
    CartView,
)
from catalog.cart import MAX_LINE_QUANTITY, CartStore
from catalog.exceptions import CartItemNotFoundError, ProductNotFoundError
from catalog.query import coerce_int

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _require_cart_product_id(product_id: Any) -> str:
    if not product_id or not is_valid_product_id(product_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid product ID is required",
        )
    return str(product_id)


def _require_quantity(raw: Any, minimum: int) -> int:
    quantity = coerce_int(raw)
    if quantity is None or quantity < minimum or quantity > MAX_LINE_QUANTITY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Quantity must be an integer between {minimum} and {MAX_LINE_QUANTITY}",
        )
    return quantity


def _product_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")


def _item_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found in cart")


def _internal_error(action: str, error: Exception) -> HTTPException:
    logger.error("Unexpected error while %s: %s", action, error, exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.get("", response_model=CartResponse, summary="View the current user's cart")
def view_cart(
    response: Response,
    user: AuthenticatedUser = Depends(authenticate),
    carts: CartStore = Depends(get_cart_store),
) -> CartResponse:
    try:
        cart = carts.get_cart(user.id)
    except Exception as e:
        raise _internal_error("reading cart", e) from e

    response.headers["X-Cart-Items"] = str(cart.item_count())
    last_updated = datetime.fromtimestamp(cart.updated_at, tz=timezone.utc)
    return CartResponse(
        cart=CartView.from_cart(cart),
        metadata=CartMetadata(
            last_updated=last_updated.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            item_count=cart.item_count(),
        ),
    )


@router.post("", response_model=CartMutationResponse, summary="Add a product to the cart")
def add_item(
    item: Optional[CartItemInput] = Body(None),
    user: AuthenticatedUser = Depends(authenticate),
    carts: CartStore = Depends(get_cart_store),
) -> CartMutationResponse:
    """
    Add a product to the cart; an existing line accumulates quantity.

    Example:
        ```bash
        POST /api/cart
        Header: Authorization: Bearer <user token>
        Body: {"productId": "3", "quantity": 2}
        ```
    """
    item = item or CartItemInput()
    product_id = _require_cart_product_id(item.product_id)
    quantity = _require_quantity(item.quantity, minimum=1)

    try:
        added = carts.add_item(user.id, product_id, quantity)
        cart = carts.get_cart(user.id)
    except ProductNotFoundError as e:
        raise _product_not_found() from e
    except Exception as e:
        raise _internal_error("adding to cart", e) from e

    return CartMutationResponse(
        message="Item added to cart",
        cart=CartView.from_cart(cart),
        added_item={"productId": added.product_id, "quantity": added.quantity},
    )


@router.put("", response_model=CartMutationResponse, summary="Set a cart line's quantity")
def update_item(
    item: Optional[CartItemUpdate] = Body(None),
    user: AuthenticatedUser = Depends(authenticate),
    carts: CartStore = Depends(get_cart_store),
) -> CartMutationResponse:
    item = item or CartItemUpdate()
    product_id = _require_cart_product_id(item.product_id)
    quantity = _require_quantity(item.quantity, minimum=0)

    try:
        cart = carts.update_item(user.id, product_id, quantity)
    except ProductNotFoundError as e:
        raise _product_not_found() from e
    except CartItemNotFoundError as e:
        raise _item_not_found() from e
    except Exception as e:
        raise _internal_error("updating cart", e) from e

    return CartMutationResponse(message="Cart item updated", cart=CartView.from_cart(cart))


@router.delete("", response_model=CartMutationResponse, summary="Remove a product from the cart")
def remove_item(
    product_id: Optional[str] = Query(None, alias="productId"),
    user: AuthenticatedUser = Depends(authenticate),
    carts: CartStore = Depends(get_cart_store),
) -> CartMutationResponse:
    product_id = _require_cart_product_id(product_id)

    try:
        removed = carts.remove_item(user.id, product_id)
        cart = carts.get_cart(user.id)
    except ProductNotFoundError as e:
        raise _product_not_found() from e
    except CartItemNotFoundError as e:
        raise _item_not_found() from e
    except Exception as e:
        raise _internal_error("removing from cart", e) from e

    return CartMutationResponse(
        message="Item removed from cart",
        cart=CartView.from_cart(cart),
        removed_item=CartItemOut(
            product_id=removed.product_id,
            name=removed.name,
            price=removed.price,
            quantity=removed.quantity,
            line_total=round(removed.line_total, 2),
            added_at=removed.added_at,
            updated_at=removed.updated_at,
        ),
    )
