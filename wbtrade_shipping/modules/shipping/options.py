"""
Shipping Options Resolver

Two menus built from the same packages:

Whole-cart mode
    One carrier menu for the entire cart. A regular carrier is available
    only when it can ship every standard package, and paczkomat follows the
    cart-wide gabaryt cascade. When oversized packages exist, the forced
    oversized option is prepended and priced at the gabaryt total; regular
    carriers then price only the standard packages.

Per-package mode
    Every package gets its own menu and a default selection. Restrictions
    apply per package, so an unrestricted package may pick paczkomat even
    when another package in the cart is oversized.

Unavailable options are priced at 0.00 in both modes.
"""
import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Mapping, Optional

from wbtrade_shipping.core.exceptions import (
    ShippingMethodUnavailableError,
    UnknownCarrierError,
    UnknownPackageError,
)
from wbtrade_shipping.modules.shipping.carriers import get_carriers, get_forced_carrier
from wbtrade_shipping.modules.shipping.carriers.base import BaseCarrier, GABARYT_ONLY_REASON
from wbtrade_shipping.modules.shipping.costs import PACZKOMAT_EXCLUDED_REASON, sum_prices
from wbtrade_shipping.modules.shipping.domain import (
    ZERO,
    CalculationResult,
    CarrierCode,
    CarrierOption,
    Package,
    PackageShippingOptions,
    PerPackageShippingResult,
    money,
)
from wbtrade_shipping.modules.shipping.rates import RateTable

logger = logging.getLogger(__name__)


def _option(
    carrier: BaseCarrier,
    price: Decimal = ZERO,
    reason: Optional[str] = None,
) -> CarrierOption:
    return CarrierOption(
        carrier_id=carrier.carrier_code.value,
        name=carrier.carrier_name,
        price=money(price) if reason is None else ZERO,
        available=reason is None,
        estimated_delivery=carrier.estimated_delivery,
        reason_if_unavailable=reason,
        forced=carrier.is_forced,
    )


# =============================================================================
# Whole-cart mode
# =============================================================================

def resolve_cart_options(calculation: CalculationResult, rates: RateTable) -> List[CarrierOption]:
    """Carrier menu shared by every package in the cart."""
    gabaryt = calculation.gabaryt_packages
    standard = calculation.standard_packages
    options: List[CarrierOption] = []

    if gabaryt:
        options.append(_option(get_forced_carrier(), calculation.gabaryt_cost))

    for carrier in get_carriers(rates.enabled_carriers):
        if gabaryt and not standard:
            reason = GABARYT_ONLY_REASON
        elif carrier.carrier_code == CarrierCode.INPOST_PACZKOMAT and not calculation.is_paczkomat_available:
            reason = PACZKOMAT_EXCLUDED_REASON
        else:
            reason = next(
                (r for r in (carrier.unavailable_reason(p) for p in standard) if r),
                None,
            )

        if reason:
            options.append(_option(carrier, reason=reason))
        else:
            options.append(_option(carrier, sum_prices(carrier, standard, rates)))

    logger.debug(
        f"Cart menu: {sum(1 for o in options if o.available)}/{len(options)} carriers available"
    )
    return options


# =============================================================================
# Per-package mode
# =============================================================================

def _package_menu(package: Package, rates: RateTable) -> List[CarrierOption]:
    carriers = get_carriers(rates.enabled_carriers)
    if package.is_gabaryt:
        carriers = [get_forced_carrier()] + carriers

    menu = []
    for carrier in carriers:
        reason = carrier.unavailable_reason(package)
        menu.append(_option(carrier, carrier.price_package(package, rates) if not reason else ZERO, reason))
    return menu


def _default_selection(package: Package, menu: List[CarrierOption], rates: RateTable) -> Optional[str]:
    available = [o.carrier_id for o in menu if o.available]
    if package.is_gabaryt:
        preferred = [CarrierCode.WYSYLKA_GABARYT.value]
    else:
        preferred = [
            CarrierCode.INPOST_PACZKOMAT.value,
            CarrierCode.INPOST_KURIER.value,
            rates.default_carrier.value,
        ]
    for carrier_id in preferred:
        if carrier_id in available:
            return carrier_id
    return available[0] if available else None


def _total(packages_with_options: List[PackageShippingOptions]) -> Decimal:
    return money(sum(
        (p.selected_option.price for p in packages_with_options if p.selected_option is not None),
        ZERO,
    ))


def resolve_package_options(calculation: CalculationResult, rates: RateTable) -> PerPackageShippingResult:
    """Independent menu and default selection for each package."""
    packages_with_options = []
    for package in calculation.packages:
        menu = _package_menu(package, rates)
        packages_with_options.append(PackageShippingOptions(
            package=package,
            carrier_options=menu,
            selected_carrier_id=_default_selection(package, menu, rates),
        ))

    return PerPackageShippingResult(
        packages_with_options=packages_with_options,
        total_shipping_cost=_total(packages_with_options),
        warnings=list(calculation.warnings),
    )


def apply_package_selections(
    result: PerPackageShippingResult,
    selections: Mapping[str, str],
) -> PerPackageShippingResult:
    """
    Apply customer choices on top of the default selections.

    Packages missing from selections keep their default carrier.

    Raises:
        UnknownPackageError: a selection names a package not in the cart
        UnknownCarrierError: the carrier is not on the package's menu
        ShippingMethodUnavailableError: the carrier cannot ship the package
    """
    by_id = {p.package.id: p for p in result.packages_with_options}
    for package_id in selections:
        if package_id not in by_id:
            raise UnknownPackageError(f"Unknown package: {package_id}", package_id=package_id)

    updated = []
    for entry in result.packages_with_options:
        carrier_id = selections.get(entry.package.id)
        if carrier_id is None:
            updated.append(entry)
            continue

        option = next((o for o in entry.carrier_options if o.carrier_id == carrier_id), None)
        if option is None:
            raise UnknownCarrierError(
                f"Carrier {carrier_id} is not offered for package {entry.package.id}",
                carrier_id=carrier_id,
            )
        if not option.available:
            raise ShippingMethodUnavailableError(
                f"{option.name} cannot ship package {entry.package.id}",
                carrier_id=carrier_id,
                package_id=entry.package.id,
                reason=option.reason_if_unavailable,
            )
        updated.append(replace(entry, selected_carrier_id=carrier_id))

    return PerPackageShippingResult(
        packages_with_options=updated,
        total_shipping_cost=_total(updated),
        warnings=list(result.warnings),
    )
