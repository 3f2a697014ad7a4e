"""
Shipping package & cost engine.

cart lines -> tag classifier -> package builder -> cost engine -> options resolver
"""
from wbtrade_shipping.modules.shipping.domain import (
    CalculationResult,
    CarrierCode,
    CarrierOption,
    CartLineItem,
    CartShippingQuote,
    Package,
    PackageKind,
    PackageShippingOptions,
    PerPackageShippingResult,
    ProductTagProfile,
    ShippingAttributes,
    ShippingRestriction,
)
from wbtrade_shipping.modules.shipping.engine import ShippingEngine
from wbtrade_shipping.modules.shipping.rates import RateTable
from wbtrade_shipping.modules.shipping.tags import TagClassifier

__all__ = [
    "CalculationResult",
    "CarrierCode",
    "CarrierOption",
    "CartLineItem",
    "CartShippingQuote",
    "Package",
    "PackageKind",
    "PackageShippingOptions",
    "PerPackageShippingResult",
    "ProductTagProfile",
    "RateTable",
    "ShippingAttributes",
    "ShippingEngine",
    "ShippingRestriction",
    "TagClassifier",
]
