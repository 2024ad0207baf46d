"""
The catalog aggregate: product set, indexes, response cache and generation.

CatalogIndex is the single owned handle every catalog operation goes through;
there is no module-level catalog state.

Concurrency model:
- Mutations (create/update/delete) take the writer lock, replace the product
  list, rebuild every index, publish the new IndexSet with one reference swap
  and clear the response cache, all before releasing the lock.
- Reads take no lock. They grab the current IndexSet once and compute their
  whole answer against it, so they see either the fully old or the fully new
  index set.

Read flow: list_products() -> ListQuery -> cache lookup -> select_products()
-> sort_products() -> paginate() -> cache store -> (payload, headers)
"""

import copy
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from catalog.comparison import build_pagination, paginate, sort_products
from catalog.exceptions import ProductNotFoundError
from catalog.indexes import IndexSet, build_indexes
from catalog.models import Product
from catalog.planner import select_products
from catalog.query import ListQuery
from catalog.sample_data import generate_products
from catalog.utils.cache import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    ResponseCache,
    make_cache_key,
)
from catalog.validation import apply_product_update, build_new_product, ensure_valid_product_input

logger = logging.getLogger(__name__)

TOTAL_COUNT_HEADER = "X-Total-Count"


class CatalogIndex:
    """
    In-memory product catalog with inverted indexes and a response cache.

    Args:
        products: Initial products (catalog order is preserved)
        seed_count: When the catalog is empty on first use, generate this many
            synthetic products (0 disables seeding)
        seed: Random seed for synthetic products
        cache_ttl_seconds: Response cache TTL
        cache_max_entries: Response cache size bound
        base_url: Prefix for pagination links
        clock: Monotonic time source for the cache
    """

    def __init__(
        self,
        products: Optional[Sequence[Product]] = None,
        seed_count: int = 0,
        seed: Optional[int] = None,
        cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        base_url: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.seed_count = seed_count
        self.seed = seed
        self.base_url = base_url
        self.cache = ResponseCache(ttl_seconds=cache_ttl_seconds, max_entries=cache_max_entries, clock=clock)
        self._write_lock = threading.Lock()
        self._products: List[Product] = list(products or [])
        self._generation = 0
        with self._write_lock:
            self._rebuild_locked()

    # ------------------------------------------------------------------
    # Index lifecycle
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._indexes.generation

    @property
    def indexes(self) -> IndexSet:
        """The currently published index set."""
        return self._indexes

    def _rebuild_locked(self) -> None:
        """Rebuild all indexes from self._products. Caller holds the writer lock."""
        self._generation += 1
        self._indexes = build_indexes(self._products, self._generation)
        self.cache.clear()

    def rebuild(self) -> IndexSet:
        """Force a full rebuild (also clears the response cache)."""
        with self._write_lock:
            self._rebuild_locked()
            return self._indexes

    def ensure_fresh(self) -> None:
        """Seed the catalog with synthetic products if it is empty."""
        if self._indexes.products or self.seed_count <= 0:
            return
        with self._write_lock:
            if self._products:
                return
            logger.info("Catalog is empty, seeding %d products", self.seed_count)
            self._products = generate_products(self.seed_count, seed=self.seed)
            self._rebuild_locked()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_products(
        self,
        page: Any = None,
        limit: Any = None,
        search: Any = None,
        category: Any = None,
        sort_by: Any = None,
        sort_order: Any = None,
    ) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """
        Answer a filtered, searched, sorted, paginated list query.

        Raw parameters are coerced (see ListQuery.from_raw); malformed values
        fall back to defaults instead of raising.

        Returns:
            (payload, headers) where payload is
            {"products": [public product dicts], "pagination": {...}} and
            headers carries X-Total-Count.
        """
        self.ensure_fresh()
        query = ListQuery.from_raw(page, limit, search, category, sort_by, sort_order)
        index_set = self._indexes
        cache_key = make_cache_key(query.as_params())

        cached = self.cache.get(cache_key, index_set.generation)
        if cached is not None:
            logger.debug("Response cache hit: %s", cache_key)
            return copy.deepcopy(cached.payload), dict(cached.headers)
        logger.debug("Response cache miss: %s", cache_key)

        matches = select_products(index_set, query.search, query.category)
        ordered = sort_products(matches, query.sort_by, query.sort_order)
        page_items, total_pages = paginate(ordered, query.page, query.limit)

        payload = {
            "products": [p.to_public_dict() for p in page_items],
            "pagination": build_pagination(query, len(ordered), total_pages, self.base_url),
        }
        headers = {TOTAL_COUNT_HEADER: str(len(ordered))}

        self.cache.put(cache_key, copy.deepcopy(payload), headers, index_set.generation)
        return payload, dict(headers)

    def find_product(self, product_id: str) -> Product:
        """
        Internal product record by id.

        Raises:
            ProductNotFoundError: If the id is unknown
        """
        self.ensure_fresh()
        product = self._indexes.primary.get(str(product_id))
        if product is None:
            raise ProductNotFoundError(str(product_id))
        return product

    def get_product(self, product_id: str) -> Dict[str, Any]:
        """Public projection of one product (raises ProductNotFoundError)."""
        return self.find_product(product_id).to_public_dict()

    def list_categories(self) -> List[str]:
        """Sorted distinct category names."""
        self.ensure_fresh()
        return sorted(self._indexes.category.keys())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _next_id_locked(self) -> str:
        return str(max((int(p.id) for p in self._products), default=0) + 1)

    def _position_locked(self, product_id: str) -> int:
        position = self._indexes.positions.get(str(product_id))
        if position is None:
            raise ProductNotFoundError(str(product_id))
        return position

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and add a new product, then rebuild indexes.

        Raises:
            ValidationFailedError: If data violates field constraints
        """
        ensure_valid_product_input(data)
        self.ensure_fresh()
        with self._write_lock:
            product = build_new_product(self._next_id_locked(), data)
            self._products = self._products + [product]
            self._rebuild_locked()
        logger.info("Created product %s (%r)", product.id, product.name)
        return product.to_public_dict()

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a partial update, replace the product and rebuild indexes.

        Raises:
            ValidationFailedError: If data violates field constraints
            ProductNotFoundError: If the id is unknown
        """
        ensure_valid_product_input(data, partial=True)
        self.ensure_fresh()
        with self._write_lock:
            position = self._position_locked(product_id)
            updated = apply_product_update(self._products[position], data)
            products = list(self._products)
            products[position] = updated
            self._products = products
            self._rebuild_locked()
        logger.info("Updated product %s (fields: %s)", updated.id, ", ".join(sorted(data)) or "none")
        return updated.to_public_dict()

    def delete_product(self, product_id: str) -> None:
        """
        Remove a product and rebuild indexes.

        Raises:
            ProductNotFoundError: If the id is unknown
        """
        self.ensure_fresh()
        with self._write_lock:
            position = self._position_locked(product_id)
            products = list(self._products)
            removed = products.pop(position)
            self._products = products
            self._rebuild_locked()
        logger.info("Deleted product %s", removed.id)
