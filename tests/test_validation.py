"""
Tests for product payload validation and sanitization.
"""

import pytest

from catalog.exceptions import ValidationFailedError
from catalog.validation import (
    apply_product_update,
    build_new_product,
    ensure_valid_product_input,
    sanitize_text,
    validate_product_input,
)
from tests.helpers import make_product

VALID = {"name": "Test Product", "price": 99.99, "category": "Electronics"}


class TestValidateProductInput:
    """Test cases for validate_product_input()."""

    def test_minimal_valid_payload(self):
        assert validate_product_input(VALID) == []

    def test_missing_required_fields(self):
        assert validate_product_input({}) == [
            "Name must be between 2 and 120 characters.",
            "Price must be a positive number.",
            "Category must be between 2 and 60 characters.",
        ]

    @pytest.mark.parametrize("field, value, message", [
        ("name", "x" * 121, "Name must be between 2 and 120 characters."),
        ("description", "d" * 501, "Description must be 500 characters or less."),
        ("price", 0, "Price must be a positive number."),
        ("price", "abc", "Price must be a positive number."),
        ("category", "C", "Category must be between 2 and 60 characters."),
        ("brand", "B", "Brand must be between 2 and 60 characters."),
        ("stock", -1, "Stock must be a non-negative integer."),
        ("stock", 2.5, "Stock must be a non-negative integer."),
        ("tags", "sale", "Tags must be an array of strings."),
    ])
    def test_field_constraints(self, field, value, message):
        assert validate_product_input({**VALID, field: value}) == [message]

    def test_numeric_strings_are_accepted(self):
        assert validate_product_input({**VALID, "price": "12.50", "stock": "3"}) == []

    def test_partial_only_checks_present_fields(self):
        assert validate_product_input({"price": 5}, partial=True) == []
        assert validate_product_input({"name": "A"}, partial=True) == [
            "Name must be between 2 and 120 characters.",
        ]

    def test_ensure_valid_raises_with_all_messages(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            ensure_valid_product_input({"name": "A", "price": -2, "category": "Toys"})
        assert exc_info.value.errors == [
            "Name must be between 2 and 120 characters.",
            "Price must be a positive number.",
        ]


class TestSanitization:
    """Test cases for sanitize_text() and product construction."""

    def test_trims_and_escapes_html(self):
        assert sanitize_text("  <b>Bold</b> & co ") == "&lt;b&gt;Bold&lt;/b&gt; &amp; co"

    def test_build_new_product_defaults(self):
        product = build_new_product("7", {**VALID, "tags": ["<new>"], "stock": "4"})

        assert product.id == "7"
        assert product.rating == 0
        assert product.stock == 4
        assert product.tags == ["&lt;new&gt;"]
        assert product.cost_price == pytest.approx(69.99)
        assert product.supplier == "Unknown"
        assert product.created_at.endswith("Z")

    def test_apply_update_keeps_identity(self):
        original = make_product("5", "Old Name", price=10.0)
        updated = apply_product_update(original, {"name": " New <Name> ", "stock": 9})

        assert updated.id == "5"
        assert updated.created_at == original.created_at
        assert updated.name == "New &lt;Name&gt;"
        assert updated.stock == 9
        assert updated.price == 10.0
        assert original.name == "Old Name"
