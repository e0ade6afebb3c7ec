"""Shared fixtures: in-memory SQLite app, fake Redis-backed history."""

from __future__ import annotations

import os

# Settings are cached on first import, so configure the environment first
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_URL"] = "redis://localhost:6399/15"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import inventory_api.db.models  # noqa: F401  registers tables on Base.metadata
from inventory_api.api.dependencies.db import get_session
from inventory_api.db.base import Base
from inventory_api.main import create_app
from inventory_api.services.stock_history import StockHistoryStore, get_stock_history


class FakeRedis:
    """Just the list commands the stock history store uses."""

    def __init__(self):
        self.lists: dict[str, list[str]] = {}

    def lpush(self, key, value):
        self.lists.setdefault(key, []).insert(0, value)
        return len(self.lists[key])

    def ltrim(self, key, start, end):
        self.lists[key] = self.lists.get(key, [])[start : end + 1]
        return True

    def lrange(self, key, start, end):
        return list(self.lists.get(key, [])[start : end + 1])

    def ping(self):
        return True


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def history_store(fake_redis):
    return StockHistoryStore(fake_redis, limit=50)


@pytest.fixture
def client(session_factory, history_store):
    def override_session():
        db = session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app = create_app()
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_stock_history] = lambda: history_store
    return TestClient(app)


@pytest.fixture
def make_product(client):
    """POST a product, returning the ``data`` section of the response."""

    def _make(**overrides):
        payload = {
            "name": "Widget",
            "sku": "WDG-1",
            "price": 9.99,
            "stock": 5,
        }
        payload.update(overrides)
        response = client.post("/api/products", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make
