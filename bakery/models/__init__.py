from bakery.models.category import Category
from bakery.models.product import Product
from bakery.models.size import ProductSize
from bakery.models.size_option import ProductSizeOption
from bakery.models.image import ProductImage
from bakery.models.cart import Cart, CartItem

__all__ = [
    "Category",
    "Product",
    "ProductSize",
    "ProductSizeOption",
    "ProductImage",
    "Cart",
    "CartItem",
]
