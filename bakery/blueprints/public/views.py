"""Public storefront: catalog, product page, price lookups and cart."""
import uuid
from flask import abort, current_app, request, session
from bakery.blueprints.public import public_bp
from bakery.blueprints.responses import fail, ok, respond
from bakery.services import cache_service, cart_service
from bakery.services.errors import SelectionNotFoundError, ValidationError
from bakery.services.formatting import format_amount, format_price
from bakery.services.pricing import (
    SizeDefinition,
    resolve_initial_selection,
    select_size,
)
from bakery.services.product_service import (
    get_active_products,
    get_categories,
    get_product,
    get_product_by_slug,
)
from bakery.services.size_option_service import pricing_context_for


def _symbol():
    return current_app.config["CURRENCY_SYMBOL"]


def _selection_dict(selection, fallback=False):
    return {
        "size_id": selection.size_id,
        "total_price": format_amount(selection.total_price),
        "display": format_price(selection.total_price, _symbol()),
        "fallback": fallback,
    }


def _product_card(product, context):
    selection = resolve_initial_selection(context)
    cover = product.cover_image
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "category": product.category.name if product.category else None,
        "price": format_amount(product.price),
        "offer_price": format_amount(product.offer_price) if product.offer_price else None,
        "is_offer": product.is_offer,
        "discount_percent": product.discount_percent,
        "from_price": _selection_dict(selection),
        "thumbnail_url": cover.thumbnail_url if cover else None,
    }


def _product_page(product):
    context = pricing_context_for(product)
    page = _product_card(product, context)
    page.update(
        {
            "description": product.description or "",
            "stock": product.stock,
            "preparation_time": product.preparation_time,
            "offer_days_remaining": product.offer_days_remaining() if product.is_offer else None,
            "sizes": [
                {
                    "size_id": option.size_id,
                    "label": option.size.label,
                    "is_default": option.is_default,
                    "additional_price": format_amount(option.size.additional_price),
                }
                for option in context.available_options
            ],
            "selection": _selection_dict(resolve_initial_selection(context)),
            "images": [img.to_dict() for img in product.images],
        }
    )
    return page


def _active_product_or_404(product_id):
    product = get_product(product_id)
    if not product or not product.is_active:
        abort(404)
    return product


def _cart_key(create=False):
    key = session.get("cart_key")
    if not key and create:
        key = uuid.uuid4().hex
        session["cart_key"] = key
    return key


def _as_int(value):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Expected a number, got {value!r}.")


def _cart_dict(cart):
    symbol = _symbol()
    if cart is None:
        return {"items": [], "total": format_amount(0), "display_total": format_price(0, symbol)}
    return {
        "items": [_cart_item_dict(item) for item in cart.items],
        "total": format_amount(cart.total),
        "display_total": format_price(cart.total, symbol),
    }


def _cart_item_dict(item):
    return {
        "id": item.id,
        "product_id": item.product_id,
        "product_name": item.product.name,
        "size_id": item.size_id,
        "size_label": SizeDefinition.from_model(item.size).label if item.size else None,
        "quantity": item.quantity,
        "unit_price": format_amount(item.unit_price),
        "line_total": format_amount(item.line_total),
    }


@public_bp.route("/")
def catalog():
    """Active products with filters."""
    category_id = request.args.get("category", type=int)
    offers_only = request.args.get("offers", "").lower() in ("1", "true", "yes")
    search = request.args.get("q")
    limit = request.args.get("limit", type=int)

    products = get_active_products(
        category_id=category_id,
        offers_only=offers_only,
        search=search,
        limit=limit,
    )
    return ok([_product_card(p, pricing_context_for(p)) for p in products])


@public_bp.route("/categories")
def categories():
    return ok([c.to_dict() for c in get_categories()])


def _cached_product_page(product_id, product=None):
    key = cache_service.product_page_key(product_id)
    cached = cache_service.get_json(key)
    if cached is not None:
        return cached

    product = product or _active_product_or_404(product_id)
    page = _product_page(product)
    cache_service.set_json(key, page)
    return page


@public_bp.route("/products/<int:product_id>")
def product_detail(product_id):
    """Product page with its size options and initial selection."""
    return ok(_cached_product_page(product_id))


@public_bp.route("/products/by-slug/<slug>")
def product_by_slug(slug):
    product = get_product_by_slug(slug)
    if not product or not product.is_active:
        abort(404)
    return ok(_cached_product_page(product.id, product))


@public_bp.route("/products/<int:product_id>/price")
def product_price(product_id):
    """Total price for a chosen size; unknown sizes fall back to the default."""
    product = _active_product_or_404(product_id)
    context = pricing_context_for(product)
    raw_size_id = request.args.get("size_id", "")

    if raw_size_id == "":
        return ok(_selection_dict(resolve_initial_selection(context)))
    try:
        return ok(_selection_dict(select_size(context, int(raw_size_id))))
    except (ValueError, SelectionNotFoundError):
        return ok(_selection_dict(resolve_initial_selection(context), fallback=True))


@public_bp.route("/cart")
def view_cart():
    key = _cart_key()
    if not key:
        return ok(_cart_dict(None))
    result = cart_service.get_cart(key)
    if not result.ok:
        return fail(result.error)
    return ok(_cart_dict(result.data))


@public_bp.route("/cart/items", methods=["POST"])
def add_cart_item():
    payload = request.get_json(silent=True) or {}
    try:
        product_id = _as_int(payload.get("product_id"))
        size_id = _as_int(payload.get("size_id"))
    except ValidationError as e:
        return fail(e)
    if product_id is None:
        return fail(ValidationError("product_id is required."))

    result = cart_service.add_to_cart(
        _cart_key(create=True),
        product_id,
        quantity=payload.get("quantity", 1),
        size_id=size_id,
    )
    return respond(result, serialize=_cart_item_dict, status=201)


@public_bp.route("/cart/items/<int:item_id>", methods=["PATCH"])
def update_cart_item(item_id):
    payload = request.get_json(silent=True) or {}
    key = _cart_key()
    if not key:
        abort(404)
    result = cart_service.update_quantity(key, item_id, payload.get("quantity"))
    return respond(result, serialize=_cart_item_dict)


@public_bp.route("/cart/items/<int:item_id>", methods=["DELETE"])
def remove_cart_item(item_id):
    key = _cart_key()
    if not key:
        abort(404)
    return respond(cart_service.remove_item(key, item_id))
