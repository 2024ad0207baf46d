"""
In-memory cart store for managing shopping carts per user.

The cart store:
- Maintains a dictionary of carts indexed by user id
- Prices lines from the catalog at the time they are added
- Automatically creates a new cart if one doesn't exist for a user
- Purges carts that have not been touched within the TTL

Note: Carts are process-local and are lost on restart.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional

from catalog.exceptions import CartItemNotFoundError
from catalog.models import Cart, CartItem
from catalog.store import CatalogIndex

logger = logging.getLogger(__name__)

DEFAULT_CART_TTL_SECONDS = 24 * 60 * 60
MAX_LINE_QUANTITY = 100


class CartStore:
    """
    Per-user carts backed by the catalog for pricing.

    Args:
        catalog: Catalog used to resolve product ids and prices
        ttl_seconds: Carts idle for longer than this are purged
        clock: Wall-clock time source (epoch seconds)
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        ttl_seconds: float = DEFAULT_CART_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.catalog = catalog
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._carts: Dict[str, Cart] = {}
        self._lock = threading.Lock()

    def _get_or_create_locked(self, user_id: str) -> Cart:
        cart = self._carts.get(user_id)
        if cart is None:
            cart = Cart(items={}, updated_at=self._clock())
            self._carts[user_id] = cart
        return cart

    def get_cart(self, user_id: str) -> Cart:
        """
        Retrieve the cart for a user, creating an empty one on first access.
        """
        with self._lock:
            return self._get_or_create_locked(user_id).model_copy(deep=True)

    def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> CartItem:
        """
        Add quantity of a catalog product to the user's cart.

        Existing lines accumulate quantity.

        Raises:
            ValueError: If quantity is outside 1..MAX_LINE_QUANTITY
            ProductNotFoundError: If the product is not in the catalog

        Returns:
            The added line (product_id and the quantity added)
        """
        if quantity < 1 or quantity > MAX_LINE_QUANTITY:
            raise ValueError(f"Quantity must be an integer between 1 and {MAX_LINE_QUANTITY}")
        product = self.catalog.find_product(product_id)

        item = CartItem(product_id=product.id, name=product.name, price=product.price, quantity=quantity)
        with self._lock:
            cart = self._get_or_create_locked(user_id)
            cart.add(item.model_copy())
            cart.updated_at = self._clock()
        logger.debug("User %s added %d x product %s", user_id, quantity, product.id)
        return item

    def update_item(self, user_id: str, product_id: str, quantity: int) -> Cart:
        """
        Set the quantity of an existing line; zero removes it.

        Raises:
            ValueError: If quantity is outside 0..MAX_LINE_QUANTITY
            ProductNotFoundError: If the product is not in the catalog
            CartItemNotFoundError: If the product is not in the cart
        """
        if quantity < 0 or quantity > MAX_LINE_QUANTITY:
            raise ValueError(f"Quantity must be an integer between 0 and {MAX_LINE_QUANTITY}")
        self.catalog.find_product(product_id)

        with self._lock:
            cart = self._get_or_create_locked(user_id)
            if str(product_id) not in cart.items:
                raise CartItemNotFoundError(str(product_id))
            cart.set_quantity(str(product_id), quantity)
            cart.updated_at = self._clock()
            return cart.model_copy(deep=True)

    def remove_item(self, user_id: str, product_id: str) -> CartItem:
        """
        Remove a line from the cart.

        Raises:
            ProductNotFoundError: If the product is not in the catalog
            CartItemNotFoundError: If the product is not in the cart

        Returns:
            The removed line
        """
        self.catalog.find_product(product_id)

        with self._lock:
            cart = self._get_or_create_locked(user_id)
            removed = cart.remove(str(product_id))
            if removed is None:
                raise CartItemNotFoundError(str(product_id))
            cart.updated_at = self._clock()
            return removed

    def purge_expired(self, now: Optional[float] = None) -> int:
        """
        Drop carts not updated within the TTL.

        Returns:
            Number of carts removed
        """
        cutoff = (now if now is not None else self._clock()) - self.ttl_seconds
        with self._lock:
            expired = [user_id for user_id, cart in self._carts.items() if cart.updated_at < cutoff]
            for user_id in expired:
                del self._carts[user_id]
        if expired:
            logger.info("Purged %d expired cart(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._carts)
