"""
Shared fixtures: small deterministic catalogs and an API client wired to them.
"""

import pytest
from fastapi.testclient import TestClient

from api.auth import create_access_token
from api.main import app
from catalog.cart import CartStore
from catalog.store import CatalogIndex
from tests.helpers import FakeClock, shoe_products

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def shoe_catalog():
    """Catalog of Red Shoe / Blue Shoe / Red Hat."""
    return CatalogIndex(products=shoe_products())


@pytest.fixture
def jwt_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    return TEST_JWT_SECRET


@pytest.fixture
def admin_headers(jwt_secret):
    token = create_access_token("admin-1", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(jwt_secret):
    token = create_access_token("user-123", role="user")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(shoe_catalog, jwt_secret, monkeypatch):
    """TestClient with the shoe catalog and a fresh cart store swapped onto app.state."""
    monkeypatch.setattr(app.state, "catalog", shoe_catalog)
    monkeypatch.setattr(app.state, "cart_store", CartStore(shoe_catalog))
    app.state.rate_limiter.reset()
    return TestClient(app)
