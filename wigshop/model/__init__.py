# ------ wigshop/model/__init__.py ------

from .product import Product, PRODUCTS, find_product, get_product, catalog_as_api
from .cart import Cart, CartLine
from .order import Order, OrderItem, OrderRecord

__all__ = [
    "Product",
    "PRODUCTS",
    "find_product",
    "get_product",
    "catalog_as_api",
    "Cart",
    "CartLine",
    "Order",
    "OrderItem",
    "OrderRecord",
]
