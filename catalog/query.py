"""
List query parameters and their coercion rules.

Malformed pagination or sort parameters are never rejected: they are clamped
or replaced by defaults so that every request produces a valid query.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
MAX_LIMIT = 100
DEFAULT_SORT_FIELD = "name"
ALLOWED_SORT_FIELDS = ("name", "price", "category", "brand", "stock", "rating", "createdAt")


def coerce_int(raw: Any) -> Optional[int]:
    """
    Parse raw into an integer, or return None.

    Accepts ints and numeric strings whose value is integral ("3", "3.0");
    rejects booleans, fractions, non-finite values and garbage.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    if not math.isfinite(value) or not value.is_integer():
        return None
    return int(value)


@dataclass(frozen=True)
class ListQuery:
    """A fully coerced product list query."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: str = ""
    category: str = ""
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str = "asc"

    @classmethod
    def from_raw(
        cls,
        page: Any = None,
        limit: Any = None,
        search: Any = None,
        category: Any = None,
        sort_by: Any = None,
        sort_order: Any = None,
    ) -> "ListQuery":
        """
        Build a query from untrusted request values.

        - page: positive integer, otherwise 1
        - limit: integer clamped to [1, MAX_LIMIT], otherwise DEFAULT_LIMIT
        - sort_by: one of ALLOWED_SORT_FIELDS, otherwise "name"
        - sort_order: "desc" only when given exactly, otherwise "asc"
        """
        page_value = coerce_int(page) if page not in (None, "") else DEFAULT_PAGE
        if page_value is None or page_value < 1:
            page_value = DEFAULT_PAGE

        limit_value = coerce_int(limit) if limit not in (None, "") else DEFAULT_LIMIT
        if limit_value is None:
            limit_value = DEFAULT_LIMIT
        limit_value = min(max(limit_value, 1), MAX_LIMIT)

        return cls(
            page=page_value,
            limit=limit_value,
            search=str(search) if search else "",
            category=str(category) if category else "",
            sort_by=sort_by if sort_by in ALLOWED_SORT_FIELDS else DEFAULT_SORT_FIELD,
            sort_order="desc" if sort_order == "desc" else "asc",
        )

    def as_params(self) -> Dict[str, Any]:
        """Wire names of the query, as used in cache keys and page links."""
        params = asdict(self)
        return {
            "page": params["page"],
            "limit": params["limit"],
            "search": params["search"],
            "category": params["category"],
            "sortBy": params["sort_by"],
            "sortOrder": params["sort_order"],
        }
