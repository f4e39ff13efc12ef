"""Shopping cart keyed by an anonymous session key."""
import logging
from datetime import datetime, timezone
from bakery.extensions import db
from bakery.models.cart import Cart, CartItem
from bakery.models.product import Product
from bakery.services.actions import store_action
from bakery.services.errors import (
    CartItemNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from bakery.services.pricing import resolve_initial_selection, select_size
from bakery.services.size_option_service import pricing_context_for

logger = logging.getLogger(__name__)


def get_or_create_cart(session_key):
    cart = Cart.query.filter_by(session_key=session_key).first()
    if not cart:
        cart = Cart(session_key=session_key)
        db.session.add(cart)
        db.session.flush()
    return cart


def _cart_item(session_key, item_id):
    item = (
        CartItem.query.join(Cart)
        .filter(Cart.session_key == session_key, CartItem.id == item_id)
        .first()
    )
    if not item:
        raise CartItemNotFoundError()
    return item


def _quantity(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number.")


@store_action
def get_cart(session_key):
    return Cart.query.filter_by(session_key=session_key).first()


@store_action
def add_to_cart(session_key, product_id, quantity=1, size_id=None):
    """Add a product, priced with the selected size (or the default one).

    The same product in the same size is merged into one line.
    """
    quantity = _quantity(quantity)
    if quantity <= 0:
        raise ValidationError("Quantity must be at least 1.")

    product = db.session.get(Product, product_id)
    if not product or not product.is_active:
        raise ProductNotFoundError()

    context = pricing_context_for(product)
    if size_id is None:
        selection = resolve_initial_selection(context)
    else:
        selection = select_size(context, size_id)

    cart = get_or_create_cart(session_key)
    item = CartItem.query.filter_by(
        cart_id=cart.id, product_id=product.id, size_id=selection.size_id
    ).first()
    if item:
        item.quantity += quantity
        item.updated_at = datetime.now(timezone.utc)
    else:
        item = CartItem(
            cart_id=cart.id,
            product_id=product.id,
            size_id=selection.size_id,
            quantity=quantity,
            unit_price=selection.total_price,
        )
        db.session.add(item)

    db.session.commit()
    return item


@store_action
def update_quantity(session_key, item_id, quantity):
    """Set a line's quantity; zero or less removes the line."""
    quantity = _quantity(quantity)
    item = _cart_item(session_key, item_id)
    if quantity <= 0:
        db.session.delete(item)
        db.session.commit()
        return None

    item.quantity = quantity
    item.updated_at = datetime.now(timezone.utc)
    db.session.commit()
    return item


@store_action
def remove_item(session_key, item_id):
    item = _cart_item(session_key, item_id)
    db.session.delete(item)
    db.session.commit()
    return None
