"""
tests/conftest.py -- Shared test fixtures for the cake-order backend.

This module provides:
  - db: function-scoped in-memory Database for store unit tests
  - _make_test_db(): isolated named shared-memory SQLite database
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient over the "fixed" order schema, plus one signed-up user
  - ingredients_client: TestClient over the "ingredients" schema with a seeded catalog

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager
from typing import NamedTuple

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.accounts import register_user
from auth.store import UserStore
from catalog.store import LayerStore
from core.database import Database
from orders.store import OrderStore

EMMA = {"name": "Emma", "email": "emma@emma.se", "password": "emmaemma"}

EMMAS_CAKE = {
    "cakeName": "Emmas cool cake",
    "topping": "strawberries",
    "cover": "cream",
    "layer1": "custard",
    "layer2": "jam",
    "sponge": "vanilla",
}


class ApiContext(NamedTuple):
    client: TestClient
    token: str
    user_id: str


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_db(db_suffix: str) -> Database:
    """Create an isolated named shared-memory SQLite database.

    A random component keeps modules from seeing each other's rows even when
    they use the same suffix.
    """
    name = f"test_{db_suffix}_{uuid.uuid4().hex[:8]}"
    return Database(f"sqlite:///file:{name}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(db: Database, user_store: UserStore, order_store: OrderStore, layer_store: LayerStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.db = db
        app.state.user_store = user_store
        app.state.order_store = order_store
        app.state.layer_store = layer_store
        yield

    return test_lifespan


def _client_for(db_suffix: str, schema: str, seed_catalog: bool):
    db = _make_test_db(db_suffix)
    user_store = UserStore(db)
    order_store = OrderStore(db, schema=schema)
    layer_store = LayerStore(db)
    if seed_catalog:
        layer_store.reload()

    emma = register_user(user_store, **EMMA)
    app.router.lifespan_context = _patch_lifespan(db, user_store, order_store, layer_store)
    return db, emma


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db() -> Generator[Database, None, None]:
    """Plain in-memory database for single-threaded store unit tests."""
    database = Database("sqlite:///:memory:")
    yield database
    database.close()


@pytest.fixture(scope="module")
def api_client() -> Generator[ApiContext, None, None]:
    """Yield (client, token, user_id) for the fixed-slot order schema.

    The user is Emma (see EMMA); token is her access token.
    """
    database, emma = _client_for("api", schema="fixed", seed_catalog=False)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(client, emma.access_token, emma.id)
    database.close()


@pytest.fixture(scope="module")
def ingredients_client() -> Generator[ApiContext, None, None]:
    """Yield (client, token, user_id) for the free-form ingredient schema with a seeded catalog."""
    database, emma = _client_for("ingredients", schema="ingredients", seed_catalog=True)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(client, emma.access_token, emma.id)
    database.close()


def signup(client: TestClient, name: str, email: str, password: str = "secret123") -> dict:
    """POST /users and return the JSON body. Asserts success."""
    resp = client.post("/users", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()
