"""
Shipping Domain Types

Carrier-agnostic data classes shared by every stage of the pipeline:

    cart lines -> tag profiles -> shipping attributes -> packages
               -> priced packages -> carrier option menus

Nothing here is persisted. Packages and results live for one calculation.
Money is always Decimal (PLN, 2 dp).
"""
import enum
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    """Quantize to grosze (2 dp, half-up)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class CarrierCode(str, enum.Enum):
    """
    Carriers known to the storefront.

    WYSYLKA_GABARYT is the forced oversized-shipment service. It is never
    chosen freely; it appears only when oversized packages exist.
    """
    INPOST_PACZKOMAT = "inpost_paczkomat"
    INPOST_KURIER = "inpost_kurier"
    DPD = "dpd"
    DHL = "dhl"
    GLS = "gls"
    POCZTEX = "pocztex"
    FEDEX = "fedex"
    UPS = "ups"
    WYSYLKA_GABARYT = "wysylka_gabaryt"


class ShippingRestriction(str, enum.Enum):
    """Product-level carrier restriction derived from tags."""
    NONE = "none"
    COURIER_ONLY = "courier_only"
    INPOST_ONLY = "inpost_only"


class PackageKind(str, enum.Enum):
    STANDARD = "standard"
    GABARYT = "gabaryt"


# =============================================================================
# Inputs
# =============================================================================

@dataclass(frozen=True)
class CartLineItem:
    """One cart line as handed over by the checkout flow."""
    variant_id: str
    quantity: int

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"quantity must be positive, got {self.quantity} for {self.variant_id}")


@dataclass(frozen=True)
class ProductTagProfile:
    """Catalog view of a product: identity plus its ordered tag list."""
    product_id: str
    name: str
    tags: Tuple[str, ...] = ()
    image_url: Optional[str] = None


@dataclass(frozen=True)
class ShippingAttributes:
    """
    Structured shipping profile of a product.

    Derived from tags only, so equal tag lists always give equal attributes.

    Attributes:
        is_gabaryt: Oversized; ships alone, one package per unit
        gabaryt_unit_price: Price from the tag; None means "use fallback at cost time"
        wholesaler_id: Grouping key; None is the ungrouped bucket
        paczkomat_unit_limit: Units of this product per locker parcel
        restriction: Carrier restriction
        weight_limit_kg: Informational "do N kg" tag value
    """
    is_gabaryt: bool = False
    gabaryt_unit_price: Optional[Decimal] = None
    wholesaler_id: Optional[str] = None
    paczkomat_unit_limit: int = 10
    restriction: ShippingRestriction = ShippingRestriction.NONE
    weight_limit_kg: Optional[Decimal] = None


@dataclass(frozen=True)
class ResolvedLineItem:
    """Cart line joined with its catalog profile and classified attributes."""
    line: CartLineItem
    profile: ProductTagProfile
    attributes: ShippingAttributes


# =============================================================================
# Packages
# =============================================================================

@dataclass
class PackageItem:
    product_id: str
    name: str
    variant_id: str
    quantity: int
    image_url: Optional[str] = None
    is_gabaryt: bool = False


@dataclass
class Package:
    """
    One physical shipment.

    A standard package is billed as one shipment but may expand into
    paczkomat_package_count locker parcels for paczkomat delivery.
    """
    id: str
    kind: PackageKind
    wholesaler_id: Optional[str]
    items: List[PackageItem] = field(default_factory=list)
    paczkomat_package_count: int = 0
    gabaryt_price: Optional[Decimal] = None
    is_paczkomat_available: bool = True
    is_inpost_only: bool = False
    has_free_shipping: bool = False

    @property
    def is_gabaryt(self) -> bool:
        return self.kind == PackageKind.GABARYT

    @property
    def unit_count(self) -> int:
        return sum(item.quantity for item in self.items)


# =============================================================================
# Costs and options
# =============================================================================

@dataclass(frozen=True)
class BreakdownLine:
    description: str
    cost: Decimal
    package_count: int


@dataclass
class CalculationResult:
    """Whole-cart packaging and default pricing summary."""
    packages: List[Package]
    total_packages: int
    total_paczkomat_packages: int
    shipping_cost: Decimal
    paczkomat_cost: Decimal
    gabaryt_cost: Decimal
    breakdown: List[BreakdownLine]
    warnings: List[str]
    is_paczkomat_available: bool

    @property
    def gabaryt_packages(self) -> List[Package]:
        return [p for p in self.packages if p.is_gabaryt]

    @property
    def standard_packages(self) -> List[Package]:
        return [p for p in self.packages if not p.is_gabaryt]


@dataclass(frozen=True)
class CarrierOption:
    carrier_id: str
    name: str
    price: Decimal
    available: bool
    estimated_delivery: str
    reason_if_unavailable: Optional[str] = None
    forced: bool = False


@dataclass
class CartShippingQuote:
    """Whole-cart mode: one carrier menu shared by every package."""
    calculation: CalculationResult
    shipping_methods: List[CarrierOption]


@dataclass
class PackageShippingOptions:
    package: Package
    carrier_options: List[CarrierOption]
    selected_carrier_id: Optional[str]

    @property
    def selected_option(self) -> Optional[CarrierOption]:
        for option in self.carrier_options:
            if option.carrier_id == self.selected_carrier_id:
                return option
        return None


@dataclass
class PerPackageShippingResult:
    """Per-package mode: independent menus and default selections."""
    packages_with_options: List[PackageShippingOptions]
    total_shipping_cost: Decimal
    warnings: List[str]
