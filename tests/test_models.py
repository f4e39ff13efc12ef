"""Tests for database models."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from bakery.models.cart import Cart, CartItem
from bakery.models.product import Product
from bakery.models.size_option import ProductSizeOption


def test_product_creation(db):
    p = Product(name="Tres Leches", slug="tres-leches", price=Decimal("55.00"))
    db.session.add(p)
    db.session.flush()

    assert p.id is not None
    assert p.is_active is True
    assert p.is_offer is False
    assert p.price == Decimal("55.00")


def test_discount_percent(db):
    p = Product(name="Pie", slug="pie", price=Decimal("40.00"), offer_price=Decimal("30.00"))
    assert p.discount_percent == 0  # offer not active

    p.is_offer = True
    assert p.discount_percent == 25

    p.offer_price = Decimal("45.00")
    assert p.discount_percent == 0  # offer is not cheaper


def test_offer_days_remaining(db):
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    p = Product(name="Pie", slug="pie", price=Decimal("40.00"))
    assert p.offer_days_remaining(now) is None

    p.offer_end_date = now + timedelta(days=2, hours=1)
    assert p.offer_days_remaining(now) == 3

    p.offer_end_date = now - timedelta(days=1)
    assert p.offer_days_remaining(now) == 0


def test_size_option_pair_is_unique(db, make_product, make_size):
    p = make_product()
    s = make_size()
    db.session.add(ProductSizeOption(product_id=p.id, size_id=s.id))
    db.session.commit()

    db.session.add(ProductSizeOption(product_id=p.id, size_id=s.id))
    with pytest.raises(IntegrityError):
        db.session.flush()
    db.session.rollback()


def test_only_one_default_per_product(db, make_product, make_size):
    p = make_product()
    small = make_size(name="Small")
    large = make_size(name="Large")
    db.session.add(ProductSizeOption(product_id=p.id, size_id=small.id, is_default=True))
    db.session.commit()

    db.session.add(ProductSizeOption(product_id=p.id, size_id=large.id, is_default=True))
    with pytest.raises(IntegrityError):
        db.session.flush()
    db.session.rollback()


def test_defaults_on_different_products_are_independent(db, make_product, make_size):
    s = make_size()
    a = make_product()
    b = make_product()
    db.session.add(ProductSizeOption(product_id=a.id, size_id=s.id, is_default=True))
    db.session.add(ProductSizeOption(product_id=b.id, size_id=s.id, is_default=True))
    db.session.commit()

    assert ProductSizeOption.query.filter_by(is_default=True).count() == 2


def test_cart_total(db, make_product):
    p = make_product(price="20.00")
    cart = Cart(session_key="abc")
    db.session.add(cart)
    db.session.flush()
    db.session.add(CartItem(cart_id=cart.id, product_id=p.id, quantity=2, unit_price=Decimal("20.00")))
    db.session.add(CartItem(cart_id=cart.id, product_id=p.id, quantity=1, unit_price=Decimal("35.50")))
    db.session.commit()

    assert cart.total == Decimal("75.50")
