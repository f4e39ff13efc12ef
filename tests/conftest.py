from decimal import Decimal

import pytest
from bakery import create_app
from bakery.extensions import db as _db
from bakery.models.product import Product
from bakery.models.size import ProductSize

ADMIN_HEADERS = {"X-Admin-Token": "test-admin-token"}


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app("testing")
    with app.app_context():
        yield app


@pytest.fixture
def db(app):
    """Fresh schema per test; services commit, so nothing to roll back."""
    _db.create_all()
    yield _db
    _db.session.remove()
    _db.drop_all()


@pytest.fixture
def client(app, db):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(name=None, price="50.00", offer_price=None, is_offer=False, is_active=True):
        counter["n"] += 1
        name = name or f"Test Cake {counter['n']}"
        product = Product(
            name=name,
            slug=f"test-cake-{counter['n']}",
            price=Decimal(price),
            offer_price=Decimal(offer_price) if offer_price is not None else None,
            is_offer=is_offer,
            is_active=is_active,
        )
        db.session.add(product)
        db.session.commit()
        return product

    return _make


@pytest.fixture
def make_size(db):
    def _make(name="Medium", person_capacity=10, additional_price="0.00", display_order=0):
        size = ProductSize(
            name=name,
            person_capacity=person_capacity,
            additional_price=Decimal(additional_price),
            display_order=display_order,
        )
        db.session.add(size)
        db.session.commit()
        return size

    return _make


class FakeRedis:
    """Just enough of redis.Redis for the page cache."""

    def __init__(self):
        self.store = {}
        self.deleted = []

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value

    def delete(self, *keys):
        self.deleted.extend(keys)
        for key in keys:
            self.store.pop(key, None)


@pytest.fixture
def fake_redis(monkeypatch):
    import bakery.extensions as ext

    fake = FakeRedis()
    monkeypatch.setattr(ext, "redis_client", fake)
    return fake
