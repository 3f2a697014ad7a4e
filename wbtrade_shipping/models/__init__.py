"""
Catalog models read by the shipping engine.
"""
from wbtrade_shipping.models.product import Product, ProductVariant

__all__ = ["Product", "ProductVariant"]
