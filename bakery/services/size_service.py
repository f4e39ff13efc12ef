"""Size catalog administration."""
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from bakery.extensions import db
from bakery.models.size import ProductSize
from bakery.models.size_option import ProductSizeOption
from bakery.services import cache_service
from bakery.services.actions import store_action
from bakery.services.errors import SizeInUseError, SizeNotFoundError, ValidationError
from bakery.services.formatting import format_amount

logger = logging.getLogger(__name__)


def _to_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def parse_size_form(data):
    """Validate size fields from a form or JSON body.

    Name and person capacity are required, capacity must be positive and
    the additional price cannot be negative (blank means 0).
    """
    name = (data.get("name") or "").strip()
    try:
        person_capacity = int(data.get("person_capacity") or 0)
    except (TypeError, ValueError):
        person_capacity = 0

    if not name or not person_capacity:
        raise ValidationError("Name and person capacity are required.")
    if person_capacity <= 0:
        raise ValidationError("Person capacity must be greater than 0.")

    raw_price = data.get("additional_price")
    try:
        additional_price = Decimal(str(raw_price)) if raw_price not in (None, "") else Decimal("0")
    except InvalidOperation:
        raise ValidationError("Additional price must be a number.")
    if not additional_price.is_finite():
        raise ValidationError("Additional price must be a number.")
    if additional_price < 0:
        raise ValidationError("Additional price cannot be negative.")

    try:
        display_order = int(data.get("display_order") or 0)
    except (TypeError, ValueError):
        display_order = 0

    return {
        "name": name,
        "person_capacity": person_capacity,
        "additional_price": additional_price,
        "description": (data.get("description") or "").strip(),
        "display_order": display_order,
        "is_active": _to_bool(data.get("is_active"), default=True),
    }


def size_to_dict(size, product_count=None):
    result = {
        "id": size.id,
        "name": size.name,
        "person_capacity": size.person_capacity,
        "additional_price": format_amount(size.additional_price),
        "description": size.description or "",
        "is_active": size.is_active,
        "display_order": size.display_order,
    }
    if product_count is not None:
        result["product_count"] = product_count
    return result


def _product_ids_using(size_id):
    rows = db.session.execute(
        db.select(ProductSizeOption.product_id).where(ProductSizeOption.size_id == size_id)
    )
    return [pid for (pid,) in rows]


@store_action
def list_sizes(active_only=True, with_counts=False):
    query = ProductSize.query.order_by(ProductSize.display_order.asc(), ProductSize.id.asc())
    if active_only:
        query = query.filter_by(is_active=True)
    sizes = query.all()
    if not with_counts:
        return [size_to_dict(s) for s in sizes]

    counts = dict(
        db.session.query(ProductSizeOption.size_id, db.func.count(ProductSizeOption.id))
        .group_by(ProductSizeOption.size_id)
        .all()
    )
    return [size_to_dict(s, product_count=counts.get(s.id, 0)) for s in sizes]


@store_action
def get_size(size_id):
    size = db.session.get(ProductSize, size_id)
    if not size:
        raise SizeNotFoundError()
    return size_to_dict(size)


@store_action
def create_size(data):
    fields = parse_size_form(data)
    size = ProductSize(**fields)
    db.session.add(size)
    db.session.commit()
    logger.info("Created size %s (%d people)", size.name, size.person_capacity)
    return size_to_dict(size)


@store_action
def update_size(size_id, data):
    size = db.session.get(ProductSize, size_id)
    if not size:
        raise SizeNotFoundError()

    for key, value in parse_size_form(data).items():
        setattr(size, key, value)
    size.updated_at = datetime.now(timezone.utc)
    db.session.commit()

    # Every product offering this size shows a different price now
    cache_service.invalidate_products(_product_ids_using(size_id))
    return size_to_dict(size)


@store_action
def delete_size(size_id):
    size = db.session.get(ProductSize, size_id)
    if not size:
        raise SizeNotFoundError()

    in_use = ProductSizeOption.query.filter_by(size_id=size_id).count()
    if in_use:
        raise SizeInUseError()

    db.session.delete(size)
    db.session.commit()
    return None


@store_action
def toggle_size(size_id, is_active):
    size = db.session.get(ProductSize, size_id)
    if not size:
        raise SizeNotFoundError()
    size.is_active = _to_bool(is_active)
    size.updated_at = datetime.now(timezone.utc)
    db.session.commit()
    return size_to_dict(size)
