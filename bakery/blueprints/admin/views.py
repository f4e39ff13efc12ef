"""Admin API: size catalog, product sizes, products and photos."""
from flask import request
from bakery.blueprints.admin import admin_bp
from bakery.blueprints.admin.auth import admin_required
from bakery.blueprints.responses import fail, ok, respond
from bakery.services import (
    product_image_service,
    product_service,
    size_option_service,
    size_service,
)
from bakery.services.errors import ValidationError
from bakery.services.formatting import format_amount


def _body():
    return request.get_json(silent=True) or request.form.to_dict()


def _options_list(options):
    return [o.to_dict() for o in options]


def _product_dict(product):
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "description": product.description or "",
        "category_id": product.category_id,
        "price": format_amount(product.price),
        "offer_price": format_amount(product.offer_price) if product.offer_price is not None else None,
        "is_offer": product.is_offer,
        "offer_end_date": product.offer_end_date.isoformat() if product.offer_end_date else None,
        "is_active": product.is_active,
        "stock": product.stock,
        "preparation_time": product.preparation_time,
        "discount_percent": product.discount_percent,
    }


def _int_field(data, field, required=True):
    value = data.get(field)
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field} is required.")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number.")


# ---------------------------------------------------------------------------
# Size catalog
# ---------------------------------------------------------------------------

@admin_bp.route("/sizes", methods=["GET"])
@admin_required
def list_sizes():
    show_all = request.args.get("all", "").lower() in ("1", "true", "yes")
    return respond(size_service.list_sizes(active_only=not show_all, with_counts=True))


@admin_bp.route("/sizes", methods=["POST"])
@admin_required
def create_size():
    return respond(size_service.create_size(_body()), status=201)


@admin_bp.route("/sizes/<int:size_id>", methods=["GET"])
@admin_required
def get_size(size_id):
    return respond(size_service.get_size(size_id))


@admin_bp.route("/sizes/<int:size_id>", methods=["PUT"])
@admin_required
def update_size(size_id):
    return respond(size_service.update_size(size_id, _body()))


@admin_bp.route("/sizes/<int:size_id>", methods=["DELETE"])
@admin_required
def delete_size(size_id):
    return respond(size_service.delete_size(size_id))


@admin_bp.route("/sizes/<int:size_id>/toggle", methods=["POST"])
@admin_required
def toggle_size(size_id):
    return respond(size_service.toggle_size(size_id, _body().get("is_active")))


# ---------------------------------------------------------------------------
# Sizes offered by a product
# ---------------------------------------------------------------------------

@admin_bp.route("/products/<int:product_id>/sizes", methods=["GET"])
@admin_required
def product_sizes(product_id):
    return respond(
        size_option_service.list_product_sizes(product_id), serialize=_options_list
    )


@admin_bp.route("/products/<int:product_id>/sizes", methods=["POST"])
@admin_required
def attach_size(product_id):
    data = _body()
    try:
        size_id = _int_field(data, "size_id")
    except ValidationError as e:
        return fail(e)
    is_default = str(data.get("is_default", "")).lower() in ("1", "true", "yes", "on")
    result = size_option_service.attach_size(product_id, size_id, is_default=is_default)
    return respond(result, serialize=lambda o: o.to_dict(), status=201)


@admin_bp.route("/products/<int:product_id>/sizes", methods=["PUT"])
@admin_required
def replace_sizes(product_id):
    data = request.get_json(silent=True) or {}
    raw_ids = data.get("size_ids") or []
    if not isinstance(raw_ids, list):
        return fail(ValidationError("size_ids must be a list of numbers."))
    try:
        size_ids = [int(s) for s in raw_ids]
        default_size_id = _int_field(data, "default_size_id", required=False)
    except (TypeError, ValueError):
        return fail(ValidationError("size_ids must be a list of numbers."))
    except ValidationError as e:
        return fail(e)
    if size_ids and default_size_id not in size_ids:
        return fail(ValidationError("The default size must be one of the selected sizes."))

    result = size_option_service.replace_all_sizes(product_id, size_ids, default_size_id)
    return respond(result, serialize=_options_list)


@admin_bp.route("/products/<int:product_id>/sizes/<int:size_id>/default", methods=["POST"])
@admin_required
def set_default_size(product_id, size_id):
    result = size_option_service.set_default_size(product_id, size_id)
    return respond(result, serialize=lambda o: o.to_dict())


@admin_bp.route("/products/<int:product_id>/sizes/<int:size_id>", methods=["DELETE"])
@admin_required
def detach_size(product_id, size_id):
    return respond(size_option_service.detach_size(product_id, size_id))


# ---------------------------------------------------------------------------
# Products and categories
# ---------------------------------------------------------------------------

@admin_bp.route("/categories", methods=["POST"])
@admin_required
def create_category():
    return respond(product_service.create_category(_body()), status=201)


@admin_bp.route("/products", methods=["POST"])
@admin_required
def create_product():
    return respond(
        product_service.create_product(_body()), serialize=_product_dict, status=201
    )


@admin_bp.route("/products/<int:product_id>", methods=["PATCH"])
@admin_required
def update_product(product_id):
    return respond(
        product_service.update_product(product_id, _body()), serialize=_product_dict
    )


# ---------------------------------------------------------------------------
# Product photos
# ---------------------------------------------------------------------------

@admin_bp.route("/products/<int:product_id>/images", methods=["GET"])
@admin_required
def list_images(product_id):
    return respond(product_image_service.list_product_images(product_id))


@admin_bp.route("/products/<int:product_id>/images", methods=["POST"])
@admin_required
def upload_image(product_id):
    upload = request.files.get("file")
    if upload is None:
        return fail(ValidationError("No file was provided."))
    result = product_image_service.upload_product_image(
        product_id, upload.read(), content_type=upload.mimetype
    )
    return respond(result, status=201)


@admin_bp.route("/products/<int:product_id>/images/order", methods=["PUT"])
@admin_required
def reorder_images(product_id):
    data = request.get_json(silent=True) or {}
    result = product_image_service.reorder_product_images(
        product_id, data.get("image_ids") or []
    )
    return respond(result)


@admin_bp.route("/images/<int:image_id>", methods=["DELETE"])
@admin_required
def delete_image(image_id):
    return respond(product_image_service.delete_product_image(image_id))


@admin_bp.route("/stats", methods=["GET"])
@admin_required
def stats():
    return ok(product_service.get_stats())
