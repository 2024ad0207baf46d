"""
End-to-end tests for the /api/cart endpoints.

This test module verifies that:
1. Every cart endpoint requires a bearer token
2. Cart responses have the expected JSON shape (camelCase keys)
3. Quantity and product id problems map to 400/404 with readable messages
"""

import pytest

from api.auth import create_access_token


class TestCartEndpointsE2E:
    """End-to-end tests for cart endpoints."""

    def test_requires_authentication(self, client):
        assert client.get("/api/cart").status_code == 401
        assert client.post("/api/cart", json={"productId": "1"}).status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid authentication token"}

    def test_empty_cart_json_shape(self, client, user_headers):
        response = client.get("/api/cart", headers=user_headers)

        assert response.status_code == 200
        assert response.headers["X-Cart-Items"] == "0"
        data = response.json()
        assert data["cart"]["items"] == []
        assert data["cart"]["total"] == 0
        assert "updatedAt" in data["cart"]
        assert data["metadata"]["itemCount"] == 0
        assert data["metadata"]["lastUpdated"].endswith("Z")

    def test_add_item_json_shape(self, client, user_headers):
        response = client.post("/api/cart", json={"productId": "1", "quantity": 2}, headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Item added to cart"
        assert data["addedItem"] == {"productId": "1", "quantity": 2}

        item = data["cart"]["items"][0]
        assert item["productId"] == "1"
        assert item["name"] == "Red Shoe"
        assert item["price"] == 50.0
        assert item["quantity"] == 2
        assert item["lineTotal"] == pytest.approx(100.0)
        assert "addedAt" in item
        assert data["cart"]["total"] == pytest.approx(100.0)

        view = client.get("/api/cart", headers=user_headers)
        assert view.headers["X-Cart-Items"] == "1"

    def test_add_defaults_to_quantity_one(self, client, user_headers):
        response = client.post("/api/cart", json={"productId": 2}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["addedItem"] == {"productId": "2", "quantity": 1}

    @pytest.mark.parametrize("body", [{}, {"productId": "abc"}, {"productId": "0"}])
    def test_add_invalid_product_id(self, client, user_headers, body):
        response = client.post("/api/cart", json=body, headers=user_headers)
        assert response.status_code == 400
        assert response.json() == {"detail": "Valid product ID is required"}

    def test_add_without_body(self, client, user_headers):
        response = client.post("/api/cart", headers=user_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("quantity", [0, 101, "two", 1.5])
    def test_add_invalid_quantity(self, client, user_headers, quantity):
        response = client.post("/api/cart", json={"productId": "1", "quantity": quantity}, headers=user_headers)
        assert response.status_code == 400
        assert response.json() == {"detail": "Quantity must be an integer between 1 and 100"}

    def test_add_unknown_product(self, client, user_headers):
        response = client.post("/api/cart", json={"productId": "99"}, headers=user_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "Product not found"}

    def test_update_item(self, client, user_headers):
        client.post("/api/cart", json={"productId": "3", "quantity": 1}, headers=user_headers)

        response = client.put("/api/cart", json={"productId": "3", "quantity": 4}, headers=user_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Cart item updated"
        assert response.json()["cart"]["items"][0]["quantity"] == 4

    def test_update_to_zero_removes(self, client, user_headers):
        client.post("/api/cart", json={"productId": "3"}, headers=user_headers)
        response = client.put("/api/cart", json={"productId": "3", "quantity": 0}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["cart"]["items"] == []

    def test_update_item_not_in_cart(self, client, user_headers):
        response = client.put("/api/cart", json={"productId": "2", "quantity": 1}, headers=user_headers)
        assert response.status_code == 404
        assert response.json() == {"detail": "Item not found in cart"}

    def test_update_invalid_quantity(self, client, user_headers):
        response = client.put("/api/cart", json={"productId": "2"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json() == {"detail": "Quantity must be an integer between 0 and 100"}

    def test_remove_item(self, client, user_headers):
        client.post("/api/cart", json={"productId": "1", "quantity": 3}, headers=user_headers)

        response = client.delete("/api/cart", params={"productId": "1"}, headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Item removed from cart"
        assert data["removedItem"]["productId"] == "1"
        assert data["removedItem"]["quantity"] == 3
        assert data["cart"]["items"] == []

    def test_remove_item_not_in_cart(self, client, user_headers):
        response = client.delete("/api/cart", params={"productId": "1"}, headers=user_headers)
        assert response.status_code == 404

    def test_remove_requires_product_id(self, client, user_headers):
        response = client.delete("/api/cart", headers=user_headers)
        assert response.status_code == 400

    def test_carts_are_isolated_per_user(self, client, user_headers):
        client.post("/api/cart", json={"productId": "1"}, headers=user_headers)

        other = {"Authorization": f"Bearer {create_access_token('user-456')}"}
        response = client.get("/api/cart", headers=other)
        assert response.json()["cart"]["items"] == []
