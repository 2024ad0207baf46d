"""
Tests for sorting, pagination and pagination metadata.
"""

from urllib.parse import parse_qs, urlparse

import pytest

from catalog.comparison import build_pagination, paginate, sort_products
from catalog.query import ListQuery
from tests.helpers import make_product, numbered_products


def ids(products):
    return [p.id for p in products]


class TestSortProducts:
    """Test cases for sort_products()."""

    def test_price_ascending_and_descending(self):
        products = [
            make_product("1", "A", price=30.0),
            make_product("2", "B", price=10.0),
            make_product("3", "C", price=20.0),
        ]
        assert ids(sort_products(products, "price", "asc")) == ["2", "3", "1"]
        assert ids(sort_products(products, "price", "desc")) == ["1", "3", "2"]

    def test_equal_prices_keep_input_order(self):
        """Stable sort: products with the same price stay in pre-sort order, in both directions."""
        products = [
            make_product("1", "A", price=5.0),
            make_product("2", "B", price=1.0),
            make_product("3", "C", price=5.0),
            make_product("4", "D", price=5.0),
        ]
        assert ids(sort_products(products, "price", "asc")) == ["2", "1", "3", "4"]
        assert ids(sort_products(products, "price", "desc")) == ["1", "3", "4", "2"]

    def test_unknown_sort_field_falls_back_to_name(self):
        products = [make_product("1", "Zebra"), make_product("2", "Apple")]
        assert ids(sort_products(products, "cost_price")) == ["2", "1"]

    def test_created_at_field(self):
        products = [
            make_product("1", "A", created_at="2024-03-01T00:00:00.000Z"),
            make_product("2", "B", created_at="2024-01-01T00:00:00.000Z"),
        ]
        assert ids(sort_products(products, "createdAt")) == ["2", "1"]

    def test_does_not_mutate_input(self):
        products = [make_product("1", "B"), make_product("2", "A")]
        sort_products(products, "name")
        assert ids(products) == ["1", "2"]

    def test_empty_and_single(self):
        assert sort_products([], "price") == []
        single = [make_product("1", "A")]
        assert ids(sort_products(single, "price", "desc")) == ["1"]


class TestPaginate:
    """Test cases for paginate()."""

    def test_third_page_of_twenty_five(self):
        """limit=10, page=3 over 25 items returns items 21-25."""
        items, total_pages = paginate(numbered_products(25), page=3, limit=10)
        assert ids(items) == ["21", "22", "23", "24", "25"]
        assert total_pages == 3

    def test_pages_sum_to_total(self):
        products = numbered_products(23)
        _, total_pages = paginate(products, page=1, limit=5)
        collected = []
        for page in range(1, total_pages + 1):
            items, _ = paginate(products, page=page, limit=5)
            collected.extend(ids(items))
        assert collected == ids(products)

    def test_out_of_range_page_is_empty(self):
        items, total_pages = paginate(numbered_products(5), page=9, limit=10)
        assert items == []
        assert total_pages == 1

    def test_no_products(self):
        items, total_pages = paginate([], page=1, limit=25)
        assert items == []
        assert total_pages == 0


class TestBuildPagination:
    """Test cases for build_pagination()."""

    def test_last_page_has_no_next_link(self):
        query = ListQuery.from_raw(page="3", limit="10")
        pagination = build_pagination(query, total_items=25, total_pages=3)

        assert pagination["currentPage"] == 3
        assert pagination["totalPages"] == 3
        assert pagination["totalItems"] == 25
        assert pagination["itemsPerPage"] == 10
        assert pagination["nextPage"] is None
        assert pagination["prevPage"] is not None

    def test_first_page_has_no_prev_link(self):
        query = ListQuery.from_raw(page="1", limit="10")
        pagination = build_pagination(query, total_items=25, total_pages=3)
        assert pagination["prevPage"] is None
        assert pagination["nextPage"] is not None

    def test_links_carry_every_query_parameter(self):
        query = ListQuery.from_raw(
            page="2", limit="5", search="red shoe", category="Clothing", sort_by="price", sort_order="desc",
        )
        pagination = build_pagination(query, total_items=30, total_pages=6, base_url="http://api.test/")

        link = urlparse(pagination["nextPage"])
        assert f"{link.scheme}://{link.netloc}{link.path}" == "http://api.test/api/products"
        params = {key: values[0] for key, values in parse_qs(link.query).items()}
        assert params == {
            "page": "3",
            "limit": "5",
            "search": "red shoe",
            "category": "Clothing",
            "sortBy": "price",
            "sortOrder": "desc",
        }
        assert parse_qs(urlparse(pagination["prevPage"]).query)["page"] == ["1"]

    def test_relative_links_without_base_url(self):
        query = ListQuery.from_raw(page="1", limit="10")
        pagination = build_pagination(query, total_items=25, total_pages=3)
        assert pagination["nextPage"].startswith("/api/products?")

    @pytest.mark.parametrize("page", [5, 10])
    def test_out_of_range_page_links_back(self, page):
        query = ListQuery.from_raw(page=str(page), limit="10")
        pagination = build_pagination(query, total_items=25, total_pages=3)
        assert pagination["nextPage"] is None
        assert pagination["prevPage"] is not None
