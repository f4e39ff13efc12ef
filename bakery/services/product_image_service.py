"""Product photo upload, removal and ordering."""
import logging
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from bakery.extensions import db
from bakery.models.image import ProductImage
from bakery.models.product import Product
from bakery.services import cache_service, image_service, storage_service
from bakery.services.actions import store_action
from bakery.services.errors import (
    ImageNotFoundError,
    ProductNotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _next_order(product_id):
    current = (
        db.session.query(db.func.max(ProductImage.image_order))
        .filter(ProductImage.product_id == product_id)
        .scalar()
    )
    return 0 if current is None else current + 1


def _discard(storage_keys):
    """Remove objects of an upload that will not be registered."""
    if not storage_keys:
        return
    try:
        storage_service.delete_many(storage_keys)
    except (BotoCoreError, ClientError):
        logger.exception("Could not clean up %s", storage_keys)


@store_action
def list_product_images(product_id):
    if not db.session.get(Product, product_id):
        raise ProductNotFoundError()
    images = (
        ProductImage.query.filter_by(product_id=product_id)
        .order_by(ProductImage.image_order.asc(), ProductImage.id.asc())
        .all()
    )
    return [img.to_dict() for img in images]


@store_action
def upload_product_image(product_id, image_bytes, content_type=None):
    """Validate, store and register a photo after the product's last one."""
    if not db.session.get(Product, product_id):
        raise ProductNotFoundError()

    try:
        jpeg = image_service.validate_image(
            image_bytes,
            content_type=content_type,
            max_size=current_app.config["MAX_IMAGE_SIZE"],
        )
        thumb = image_service.create_thumbnail(jpeg)
    except ValueError as e:
        raise ValidationError(str(e))

    image_order = _next_order(product_id)
    key, thumb_key = storage_service.product_image_keys(product_id)
    uploaded = []
    try:
        for storage_key, data in ((key, jpeg), (thumb_key, thumb)):
            storage_service.upload(storage_key, data)
            uploaded.append(storage_key)
    except (BotoCoreError, ClientError) as e:
        logger.exception("Upload failed for product %s", product_id)
        _discard(uploaded)
        raise StorageError() from e

    image = ProductImage(
        product_id=product_id,
        storage_key=key,
        thumbnail_key=thumb_key,
        url=storage_service.get_public_url(key),
        thumbnail_url=storage_service.get_public_url(thumb_key),
        image_order=image_order,
    )
    try:
        db.session.add(image)
        db.session.commit()
    except SQLAlchemyError:
        # Don't leave orphaned objects in the bucket
        db.session.rollback()
        _discard(uploaded)
        raise

    cache_service.invalidate_product(product_id)
    return image.to_dict()


@store_action
def delete_product_image(image_id):
    image = db.session.get(ProductImage, image_id)
    if not image:
        raise ImageNotFoundError()

    product_id = image.product_id
    try:
        storage_service.delete_many([image.storage_key, image.thumbnail_key])
    except (BotoCoreError, ClientError):
        # The record goes anyway; an orphaned object is harmless
        logger.exception("Could not delete %s from storage", image.storage_key)

    db.session.delete(image)
    db.session.commit()
    cache_service.invalidate_product(product_id)
    return None


@store_action
def reorder_product_images(product_id, image_ids):
    """Set image_order from the position of each id in ``image_ids``."""
    if not db.session.get(Product, product_id):
        raise ProductNotFoundError()

    images = {img.id: img for img in ProductImage.query.filter_by(product_id=product_id)}
    try:
        image_ids = [int(i) for i in image_ids]
    except (TypeError, ValueError):
        raise ValidationError("Image ids must be numbers.")
    if len(set(image_ids)) != len(image_ids) or set(image_ids) != set(images):
        raise ValidationError("The new order must list every image of the product exactly once.")

    for position, image_id in enumerate(image_ids):
        images[image_id].image_order = position
    db.session.commit()
    cache_service.invalidate_product(product_id)
    return [images[i].to_dict() for i in image_ids]
