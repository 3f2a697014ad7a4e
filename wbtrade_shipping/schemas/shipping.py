"""
Checkout Shipping Schemas

Pydantic models for the checkout shipping API. Money is Decimal inside the
engine and rendered as floats rounded to 2 dp here.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


# ==================== Request Schemas ====================


class CartItemInput(BaseModel):
    """One cart line."""
    variant_id: str = Field(..., min_length=1, max_length=64)
    quantity: int = Field(..., gt=0, le=10000)

    @field_validator("variant_id")
    @classmethod
    def strip_variant_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("variant_id must not be blank")
        return v


class ShippingCalculateRequest(BaseModel):
    """Cart lines in cart order."""
    items: List[CartItemInput] = Field(default_factory=list)


class ShippingCostRequest(ShippingCalculateRequest):
    """Price the cart for one carrier."""
    carrier_id: str = Field(..., min_length=1, max_length=50)


class PackageSelectionRequest(ShippingCalculateRequest):
    """Per-package carrier choices: package id -> carrier id."""
    selections: Dict[str, str] = Field(default_factory=dict)


# ==================== Package Schemas ====================


class PackageItemResponse(BaseModel):
    product_id: str
    name: str
    variant_id: str
    quantity: int
    image_url: Optional[str] = None
    is_gabaryt: bool = False


class PackageResponse(BaseModel):
    """One physical shipment."""
    id: str
    type: str = Field(..., description="standard or gabaryt")
    wholesaler: Optional[str] = None
    items: List[PackageItemResponse]
    paczkomat_package_count: int
    gabaryt_price: Optional[float] = None
    is_paczkomat_available: bool
    is_inpost_only: bool
    has_free_shipping: bool = False


class BreakdownLineResponse(BaseModel):
    description: str
    cost: float
    package_count: int


class CarrierOptionResponse(BaseModel):
    """A single carrier menu entry."""
    id: str
    name: str
    price: float
    available: bool
    estimated_delivery: str
    message: Optional[str] = Field(None, description="Reason when unavailable")
    forced: bool = False


# ==================== Result Schemas ====================


class ShippingCalculationResponse(BaseModel):
    """Whole-cart calculation plus the shared carrier menu."""
    packages: List[PackageResponse]
    total_packages: int
    total_paczkomat_packages: int
    shipping_cost: float
    paczkomat_cost: float
    gabaryt_cost: float
    breakdown: List[BreakdownLineResponse]
    warnings: List[str]
    is_paczkomat_available: bool
    shipping_methods: List[CarrierOptionResponse]
    currency: str = "PLN"


class PackageOptionsResponse(BaseModel):
    package: PackageResponse
    carrier_options: List[CarrierOptionResponse]
    selected_carrier_id: Optional[str] = None


class PerPackageShippingResponse(BaseModel):
    """Independent carrier menus per package."""
    packages_with_options: List[PackageOptionsResponse]
    total_shipping_cost: float
    warnings: List[str]
    currency: str = "PLN"


class ShippingCostResponse(BaseModel):
    carrier_id: str
    cost: float
    currency: str = "PLN"
