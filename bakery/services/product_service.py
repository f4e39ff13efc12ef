import logging
import re
import unicodedata
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from bakery.extensions import db
from bakery.models.category import Category
from bakery.models.product import Product
from bakery.services import cache_service
from bakery.services.actions import store_action
from bakery.services.errors import (
    CategoryNotFoundError,
    ProductNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "name",
    "description",
    "price",
    "offer_price",
    "is_offer",
    "offer_end_date",
    "is_active",
    "stock",
    "preparation_time",
    "category_id",
}


def slugify(name):
    """Build a URL slug: lowercase ASCII, accents dropped, words joined by '-'."""
    normalized = unicodedata.normalize("NFD", name.lower())
    stripped = "".join(c for c in normalized if not unicodedata.combining(c))
    stripped = re.sub(r"[^a-z0-9\s-]", "", stripped).strip()
    stripped = re.sub(r"\s+", "-", stripped)
    return re.sub(r"-+", "-", stripped)


def generate_slug(name, exclude_id=None):
    """Slug for ``name`` that no other product uses yet."""
    base = slugify(name) or "product"
    slug = base
    n = 2
    while True:
        query = Product.query.filter_by(slug=slug)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        if not db.session.query(query.exists()).scalar():
            return slug
        slug = f"{base}-{n}"
        n += 1


def _parse_amount(value, field):
    if value in (None, ""):
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number.")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field} cannot be negative.")
    return amount


def _parse_int(value, field):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number.")
    if number < 0:
        raise ValidationError(f"{field} cannot be negative.")
    return number


def _parse_date(value):
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError("offer_end_date must be an ISO date.")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _clean_fields(data):
    """Validate the editable subset of ``data``."""
    fields = {}
    for key in EDITABLE_FIELDS & set(data):
        value = data[key]
        if key == "name":
            value = (value or "").strip()
            if not value:
                raise ValidationError("Name is required.")
        elif key == "description":
            value = (value or "").strip()
        elif key in ("price", "offer_price"):
            value = _parse_amount(value, key)
        elif key in ("is_offer", "is_active"):
            value = bool(value) if isinstance(value, bool) else str(value).lower() in ("1", "true", "yes", "on")
        elif key in ("stock", "preparation_time"):
            value = _parse_int(value, key)
        elif key == "offer_end_date":
            value = _parse_date(value)
        elif key == "category_id":
            if value in (None, ""):
                value = None
            elif not db.session.get(Category, value):
                raise CategoryNotFoundError()
        fields[key] = value
    return fields


def _check_offer(product):
    if product.price is None:
        raise ValidationError("Price is required.")
    if product.is_offer and not product.offer_price:
        raise ValidationError("An offer needs an offer price.")


@store_action
def create_category(data):
    name = (data.get("name") or "").strip()
    if not name:
        raise ValidationError("Category name is required.")
    if Category.query.filter(db.func.lower(Category.name) == name.lower()).first():
        raise ValidationError("A category with that name already exists.")
    category = Category(name=name, description=(data.get("description") or "").strip())
    db.session.add(category)
    db.session.commit()
    return category.to_dict()


def get_categories(active_only=True):
    query = Category.query.order_by(Category.name.asc())
    if active_only:
        query = query.filter_by(is_active=True)
    return query.all()


@store_action
def create_product(data):
    fields = _clean_fields(data)
    if "name" not in fields:
        raise ValidationError("Name is required.")

    product = Product(**fields)
    product.slug = generate_slug(product.name)
    _check_offer(product)

    db.session.add(product)
    db.session.commit()
    logger.info("Created product %s (%s)", product.slug, product.id)
    return product


@store_action
def update_product(product_id, data):
    product = db.session.get(Product, product_id)
    if not product:
        raise ProductNotFoundError()

    fields = _clean_fields(data)
    for key, value in fields.items():
        setattr(product, key, value)
    if "name" in fields:
        product.slug = generate_slug(product.name, exclude_id=product.id)
    _check_offer(product)

    product.updated_at = datetime.now(timezone.utc)
    db.session.commit()
    cache_service.invalidate_product(product.id)
    return product


def get_active_products(category_id=None, offers_only=False, search=None, limit=None):
    """Active products for the storefront catalog, sorted by name."""
    query = Product.query.filter_by(is_active=True)

    if category_id:
        query = query.filter(Product.category_id == category_id)
    if offers_only:
        query = query.filter(Product.is_offer.is_(True))
    if search:
        query = query.filter(Product.name.ilike(f"%{search}%"))

    query = query.order_by(Product.name.asc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_product(product_id):
    return db.session.get(Product, product_id)


def get_product_by_slug(slug):
    return Product.query.filter_by(slug=slug.lower()).first()


def get_stats():
    """Product counts for the ``stats`` command."""
    total = Product.query.count()
    active = Product.query.filter_by(is_active=True).count()
    on_offer = Product.query.filter_by(is_active=True, is_offer=True).count()
    return {"total": total, "active": active, "inactive": total - active, "on_offer": on_offer}
