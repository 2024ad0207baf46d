"""
Tests for list query coercion: malformed values are defaulted or clamped, never rejected.
"""

import pytest

from catalog.query import DEFAULT_LIMIT, MAX_LIMIT, ListQuery, coerce_int


class TestCoerceInt:
    """Test cases for coerce_int()."""

    @pytest.mark.parametrize("raw, expected", [
        ("3", 3),
        (" 7 ", 7),
        ("3.0", 3),
        (12, 12),
        ("-4", -4),
    ])
    def test_integral_values(self, raw, expected):
        assert coerce_int(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "2.5", "nan", "inf", True, False])
    def test_rejected_values(self, raw):
        assert coerce_int(raw) is None


class TestListQuery:
    """Test cases for ListQuery.from_raw()."""

    def test_defaults(self):
        query = ListQuery.from_raw()
        assert query == ListQuery(page=1, limit=DEFAULT_LIMIT, search="", category="", sort_by="name", sort_order="asc")

    @pytest.mark.parametrize("page", ["0", "-3", "abc", "1.5"])
    def test_bad_page_defaults_to_one(self, page):
        assert ListQuery.from_raw(page=page).page == 1

    def test_limit_is_clamped(self):
        assert ListQuery.from_raw(limit="500").limit == MAX_LIMIT
        assert ListQuery.from_raw(limit="0").limit == 1
        assert ListQuery.from_raw(limit="-5").limit == 1
        assert ListQuery.from_raw(limit="oops").limit == DEFAULT_LIMIT

    def test_unknown_sort_field_defaults_to_name(self):
        assert ListQuery.from_raw(sort_by="cost_price").sort_by == "name"
        assert ListQuery.from_raw(sort_by="createdAt").sort_by == "createdAt"

    def test_sort_order_desc_only_when_exact(self):
        assert ListQuery.from_raw(sort_order="desc").sort_order == "desc"
        assert ListQuery.from_raw(sort_order="DESC").sort_order == "asc"
        assert ListQuery.from_raw(sort_order="sideways").sort_order == "asc"

    def test_as_params_uses_wire_names(self):
        params = ListQuery.from_raw(page="2", sort_by="price", sort_order="desc").as_params()
        assert params == {
            "page": 2,
            "limit": DEFAULT_LIMIT,
            "search": "",
            "category": "",
            "sortBy": "price",
            "sortOrder": "desc",
        }
