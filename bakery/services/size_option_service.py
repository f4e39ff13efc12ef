"""Attach, detach and reassign the sizes offered for a product.

Each mutation runs in a single transaction: clearing the old default and
flagging the new one, or deleting and re-inserting the whole set, either
commits together or not at all. A partial unique index on
``product_size_options(product_id) WHERE is_default`` backs the
one-default-per-product rule against concurrent writers.
"""
import logging
from sqlalchemy.exc import IntegrityError
from bakery.extensions import db
from bakery.models.product import Product
from bakery.models.size import ProductSize
from bakery.models.size_option import ProductSizeOption
from bakery.services import cache_service
from bakery.services.actions import store_action
from bakery.services.errors import (
    DuplicateVariantError,
    ProductNotFoundError,
    SizeNotFoundError,
    VariantNotFoundError,
)
from bakery.services.pricing import PricingContext, ProductVariantOption

logger = logging.getLogger(__name__)


def _require_product(product_id):
    product = db.session.get(Product, product_id)
    if not product:
        raise ProductNotFoundError()
    return product


def _require_size(size_id):
    size = db.session.get(ProductSize, size_id)
    if not size:
        raise SizeNotFoundError()
    return size


def _clear_defaults(product_id):
    db.session.execute(
        db.update(ProductSizeOption)
        .where(ProductSizeOption.product_id == product_id)
        .values(is_default=False)
    )


def _options_query(product_id):
    return (
        ProductSizeOption.query.join(ProductSize)
        .filter(ProductSizeOption.product_id == product_id)
        .order_by(
            ProductSizeOption.is_default.desc(),
            ProductSize.display_order.asc(),
            ProductSizeOption.id.asc(),
        )
    )


def fetch_options(product_id):
    """Ordered options of a product as typed records."""
    return [ProductVariantOption.from_model(o) for o in _options_query(product_id)]


def pricing_context_for(product):
    return PricingContext.from_product(product, fetch_options(product.id))


@store_action
def list_product_sizes(product_id):
    _require_product(product_id)
    return fetch_options(product_id)


@store_action
def attach_size(product_id, size_id, is_default=False):
    _require_product(product_id)
    _require_size(size_id)

    existing = ProductSizeOption.query.filter_by(
        product_id=product_id, size_id=size_id
    ).first()
    if existing:
        raise DuplicateVariantError()

    if is_default:
        _clear_defaults(product_id)

    option = ProductSizeOption(
        product_id=product_id, size_id=size_id, is_default=bool(is_default)
    )
    db.session.add(option)
    try:
        db.session.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent attach of the same pair
        raise DuplicateVariantError() from e

    db.session.commit()
    cache_service.invalidate_product(product_id)
    logger.info(
        "Attached size %s to product %s%s",
        size_id,
        product_id,
        " as default" if is_default else "",
    )
    return ProductVariantOption.from_model(option)


@store_action
def set_default_size(product_id, size_id):
    _clear_defaults(product_id)
    result = db.session.execute(
        db.update(ProductSizeOption)
        .where(
            ProductSizeOption.product_id == product_id,
            ProductSizeOption.size_id == size_id,
        )
        .values(is_default=True)
    )
    if result.rowcount == 0:
        raise VariantNotFoundError()

    db.session.commit()
    cache_service.invalidate_product(product_id)

    option = ProductSizeOption.query.filter_by(
        product_id=product_id, size_id=size_id
    ).one()
    return ProductVariantOption.from_model(option)


@store_action
def replace_all_sizes(product_id, size_ids, default_size_id=None):
    """Replace the product's size set with ``size_ids`` in the given order."""
    size_ids = list(size_ids)
    _require_product(product_id)

    if len(set(size_ids)) != len(size_ids):
        raise DuplicateVariantError("The same size is listed more than once.")
    for size_id in size_ids:
        _require_size(size_id)
    if size_ids and default_size_id not in size_ids:
        logger.warning(
            "Default size %s is not among %s for product %s; no default will be set",
            default_size_id,
            size_ids,
            product_id,
        )

    db.session.execute(
        db.delete(ProductSizeOption).where(ProductSizeOption.product_id == product_id)
    )
    options = [
        ProductSizeOption(
            product_id=product_id,
            size_id=size_id,
            is_default=(size_id == default_size_id),
        )
        for size_id in size_ids
    ]
    db.session.add_all(options)
    try:
        db.session.flush()
    except IntegrityError as e:
        raise DuplicateVariantError() from e
    db.session.commit()
    cache_service.invalidate_product(product_id)
    return [ProductVariantOption.from_model(o) for o in options]


@store_action
def detach_size(product_id, size_id):
    option = ProductSizeOption.query.filter_by(
        product_id=product_id, size_id=size_id
    ).first()
    if not option:
        raise VariantNotFoundError()

    was_default = option.is_default
    db.session.delete(option)
    db.session.commit()
    cache_service.invalidate_product(product_id)

    if was_default:
        logger.warning(
            "Removed default size %s from product %s; no default remains",
            size_id,
            product_id,
        )
    return None
