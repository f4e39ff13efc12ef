"""Store and catalog errors.

Every error carries a user-facing ``message`` and the HTTP ``status_code``
the routes answer with, so callers can translate any failure uniformly.
"""


class StoreError(Exception):
    """Base class for failures surfaced by service operations."""

    message = "Something went wrong, please try again."
    status_code = 500

    def __init__(self, message=None):
        if message:
            self.message = message
        super().__init__(self.message)


class ValidationError(StoreError):
    message = "Invalid data."
    status_code = 400


class SelectionNotFoundError(StoreError):
    """Requested size is not one of the product's options."""

    message = "That size is not available for this product."
    status_code = 400


class NotFoundError(StoreError):
    message = "Not found."
    status_code = 404


class ProductNotFoundError(NotFoundError):
    message = "Product not found."


class CategoryNotFoundError(NotFoundError):
    message = "Category not found."


class SizeNotFoundError(NotFoundError):
    message = "Size not found."


class VariantNotFoundError(NotFoundError):
    message = "This size is not assigned to the product."


class ImageNotFoundError(NotFoundError):
    message = "Image not found."


class CartItemNotFoundError(NotFoundError):
    message = "Cart item not found."


class DuplicateVariantError(StoreError):
    message = "This size is already assigned to the product."
    status_code = 409


class SizeInUseError(StoreError):
    message = "A size that is assigned to products cannot be deleted."
    status_code = 409


class StorageError(StoreError):
    message = "Could not store the image."
    status_code = 502


class TransientStoreError(StoreError):
    message = "The store is temporarily unavailable, please try again."
    status_code = 503
