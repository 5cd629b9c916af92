"""Pytest configuration and fixtures for Petstores tests."""

import itertools

import pytest

from petstores_server.cart_store import CartStore
from petstores_server.catalog import Catalog
from petstores_server.composer import ShopStateComposer
from petstores_server.shop import Shop

SESSION = "session-1"


@pytest.fixture
def catalog() -> Catalog:
    """Built-in catalog."""
    return Catalog.default()


@pytest.fixture
def store() -> CartStore:
    """Empty cart store."""
    return CartStore()


@pytest.fixture
def composer(catalog: Catalog, store: CartStore) -> ShopStateComposer:
    """Composer over the built-in catalog."""
    return ShopStateComposer(catalog, store)


@pytest.fixture
def shop(catalog: Catalog, store: CartStore) -> Shop:
    """Shop with predictable order IDs."""
    counter = itertools.count(1)
    return Shop(catalog, store, order_ids=lambda: f"PB-TEST{next(counter)}")
