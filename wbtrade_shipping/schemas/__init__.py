from wbtrade_shipping.schemas.shipping import (
    CartItemInput,
    ShippingCalculateRequest,
    ShippingCostRequest,
    PackageSelectionRequest,
    PackageResponse,
    CarrierOptionResponse,
    ShippingCalculationResponse,
    PerPackageShippingResponse,
    ShippingCostResponse,
)

__all__ = [
    "CartItemInput",
    "ShippingCalculateRequest",
    "ShippingCostRequest",
    "PackageSelectionRequest",
    "PackageResponse",
    "CarrierOptionResponse",
    "ShippingCalculationResponse",
    "PerPackageShippingResponse",
    "ShippingCostResponse",
]
