"""
Checkout Shipping API Routes

Provides endpoints for:
- Whole-cart calculation with one shared carrier menu
- Per-package carrier menus with default selections
- Cart price for a chosen carrier
- Validation of per-package carrier selections

Shipping and catalog errors are mapped to responses by core.error_handler.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from wbtrade_shipping.core.database import get_db
from wbtrade_shipping.modules.shipping.domain import (
    CarrierOption,
    CartLineItem,
    Package,
    PerPackageShippingResult,
)
from wbtrade_shipping.schemas.shipping import (
    BreakdownLineResponse,
    CarrierOptionResponse,
    CartItemInput,
    PackageItemResponse,
    PackageOptionsResponse,
    PackageResponse,
    PackageSelectionRequest,
    PerPackageShippingResponse,
    ShippingCalculateRequest,
    ShippingCalculationResponse,
    ShippingCostRequest,
    ShippingCostResponse,
)
from wbtrade_shipping.services.shipping_calculator import ShippingCalculatorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout/shipping", tags=["Shipping"])


# ==================== Helper Functions ====================


def get_shipping_calculator(db: AsyncSession = Depends(get_db)) -> ShippingCalculatorService:
    return ShippingCalculatorService(db)


def to_float(value: Optional[Decimal]) -> Optional[float]:
    if value is None:
        return None
    return round(float(value), 2)


def to_line_items(items: List[CartItemInput]) -> List[CartLineItem]:
    return [CartLineItem(variant_id=item.variant_id, quantity=item.quantity) for item in items]


def package_to_response(package: Package) -> PackageResponse:
    return PackageResponse(
        id=package.id,
        type=package.kind.value,
        wholesaler=package.wholesaler_id,
        items=[
            PackageItemResponse(
                product_id=item.product_id,
                name=item.name,
                variant_id=item.variant_id,
                quantity=item.quantity,
                image_url=item.image_url,
                is_gabaryt=item.is_gabaryt,
            )
            for item in package.items
        ],
        paczkomat_package_count=package.paczkomat_package_count,
        gabaryt_price=to_float(package.gabaryt_price),
        is_paczkomat_available=package.is_paczkomat_available,
        is_inpost_only=package.is_inpost_only,
        has_free_shipping=package.has_free_shipping,
    )


def option_to_response(option: CarrierOption) -> CarrierOptionResponse:
    return CarrierOptionResponse(
        id=option.carrier_id,
        name=option.name,
        price=to_float(option.price),
        available=option.available,
        estimated_delivery=option.estimated_delivery,
        message=option.reason_if_unavailable,
        forced=option.forced,
    )


def per_package_to_response(result: PerPackageShippingResult, currency: str) -> PerPackageShippingResponse:
    return PerPackageShippingResponse(
        packages_with_options=[
            PackageOptionsResponse(
                package=package_to_response(entry.package),
                carrier_options=[option_to_response(o) for o in entry.carrier_options],
                selected_carrier_id=entry.selected_carrier_id,
            )
            for entry in result.packages_with_options
        ],
        total_shipping_cost=to_float(result.total_shipping_cost),
        warnings=result.warnings,
        currency=currency,
    )


# ==================== Endpoints ====================


@router.post("/calculate", response_model=ShippingCalculationResponse)
async def calculate_shipping(
    request: ShippingCalculateRequest,
    calculator: ShippingCalculatorService = Depends(get_shipping_calculator),
):
    """
    Split the cart into packages and price it.

    Returns the packages, default-carrier totals, warnings and the carrier
    menu shared by the whole cart.
    """
    quote = await calculator.quote_cart(to_line_items(request.items))
    result = quote.calculation

    return ShippingCalculationResponse(
        packages=[package_to_response(p) for p in result.packages],
        total_packages=result.total_packages,
        total_paczkomat_packages=result.total_paczkomat_packages,
        shipping_cost=to_float(result.shipping_cost),
        paczkomat_cost=to_float(result.paczkomat_cost),
        gabaryt_cost=to_float(result.gabaryt_cost),
        breakdown=[
            BreakdownLineResponse(
                description=line.description,
                cost=to_float(line.cost),
                package_count=line.package_count,
            )
            for line in result.breakdown
        ],
        warnings=result.warnings,
        is_paczkomat_available=result.is_paczkomat_available,
        shipping_methods=[option_to_response(o) for o in quote.shipping_methods],
        currency=calculator.engine.rates.currency,
    )


@router.post("/per-package", response_model=PerPackageShippingResponse)
async def get_shipping_options_per_package(
    request: ShippingCalculateRequest,
    calculator: ShippingCalculatorService = Depends(get_shipping_calculator),
):
    """Carrier menu and default selection for each package."""
    result = await calculator.get_shipping_options_per_package(to_line_items(request.items))
    return per_package_to_response(result, calculator.engine.rates.currency)


@router.post("/cost", response_model=ShippingCostResponse)
async def calculate_shipping_cost(
    request: ShippingCostRequest,
    calculator: ShippingCalculatorService = Depends(get_shipping_calculator),
):
    """Price the whole cart for one carrier."""
    cost = await calculator.calculate_shipping_cost(to_line_items(request.items), request.carrier_id)
    return ShippingCostResponse(
        carrier_id=request.carrier_id,
        cost=to_float(cost),
        currency=calculator.engine.rates.currency,
    )


@router.post("/selection", response_model=PerPackageShippingResponse)
async def quote_package_selections(
    request: PackageSelectionRequest,
    calculator: ShippingCalculatorService = Depends(get_shipping_calculator),
):
    """Validate per-package carrier choices and return the resulting total."""
    result = await calculator.quote_package_selections(
        to_line_items(request.items), request.selections
    )
    return per_package_to_response(result, calculator.engine.rates.currency)
