"""
Cost Engine

Prices packages against the static rate table and builds the cart summary.

Rules:
    gabaryt package   -> tag price, or the flat oversized rate when missing
    standard package  -> one flat shipment under the chosen carrier
    paczkomat         -> paczkomat_package_count x locker parcel rate
    free shipping     -> 0 under every carrier

Cart-wide paczkomat is available only when the cart has no gabaryt package
at all. One oversized item takes lockers away from the whole cart.
"""
import logging
from decimal import Decimal
from typing import List, Sequence

from wbtrade_shipping.core.exceptions import ShippingMethodUnavailableError, UnknownCarrierError
from wbtrade_shipping.modules.shipping.carriers import get_carrier, get_forced_carrier
from wbtrade_shipping.modules.shipping.carriers.base import BaseCarrier, GABARYT_CARRIER_REASON
from wbtrade_shipping.modules.shipping.domain import (
    ZERO,
    BreakdownLine,
    CalculationResult,
    CarrierCode,
    Package,
    money,
)
from wbtrade_shipping.modules.shipping.rates import RateTable

logger = logging.getLogger(__name__)

GABARYT_BREAKDOWN = "Produkty gabarytowe ({count} szt.)"
STANDARD_BREAKDOWN = "Standardowe paczki ({count} hurtowni)"

GABARYT_EXCLUDES_PACZKOMAT_WARNING = (
    "Produkty gabarytowe nie mogą być wysłane do paczkomatu. Dostępna tylko dostawa kurierem."
)
MULTIPLE_WHOLESALERS_WARNING = (
    "Produkty pochodzą z {count} różnych hurtowni, dlatego będą wysłane jako {count} osobne paczki."
)
PACZKOMAT_SPLIT_WARNING = (
    "Ze względu na limity pakowania, produkty zostaną wysłane w {count} paczkach do paczkomatu."
)
PACZKOMAT_EXCLUDED_REASON = "Produkty gabarytowe wykluczają dostawę do paczkomatu"


def sum_prices(carrier: BaseCarrier, packages: Sequence[Package], rates: RateTable) -> Decimal:
    return money(sum((carrier.price_package(p, rates) for p in packages), ZERO))


def calculate_costs(
    packages: List[Package],
    rates: RateTable,
    warnings: Sequence[str] = (),
) -> CalculationResult:
    """
    Aggregate packages into the cart-level summary.

    Args:
        packages: Output of the package builder
        rates: Static rate table
        warnings: Warnings and notices raised by earlier stages, kept first

    Returns:
        CalculationResult priced with the default carrier
    """
    gabaryt_packages = [p for p in packages if p.is_gabaryt]
    standard_packages = [p for p in packages if not p.is_gabaryt]

    forced = get_forced_carrier()
    default_carrier = get_carrier(rates.default_carrier)
    paczkomat = get_carrier(CarrierCode.INPOST_PACZKOMAT)

    gabaryt_cost = sum_prices(forced, gabaryt_packages, rates)
    standard_cost = sum_prices(default_carrier, standard_packages, rates)

    breakdown: List[BreakdownLine] = []
    if gabaryt_packages:
        breakdown.append(BreakdownLine(
            description=GABARYT_BREAKDOWN.format(count=len(gabaryt_packages)),
            cost=gabaryt_cost,
            package_count=len(gabaryt_packages),
        ))
    if standard_packages:
        breakdown.append(BreakdownLine(
            description=STANDARD_BREAKDOWN.format(count=len(standard_packages)),
            cost=standard_cost,
            package_count=len(standard_packages),
        ))

    is_paczkomat_available = not gabaryt_packages
    total_paczkomat_packages = sum(p.paczkomat_package_count for p in packages)
    paczkomat_cost = (
        sum_prices(paczkomat, standard_packages, rates) if is_paczkomat_available else ZERO
    )

    all_warnings = list(warnings)
    if not is_paczkomat_available:
        all_warnings.append(GABARYT_EXCLUDES_PACZKOMAT_WARNING)
    if len(standard_packages) > 1:
        all_warnings.append(MULTIPLE_WHOLESALERS_WARNING.format(count=len(standard_packages)))
    if total_paczkomat_packages > 1 and is_paczkomat_available:
        all_warnings.append(PACZKOMAT_SPLIT_WARNING.format(count=total_paczkomat_packages))

    return CalculationResult(
        packages=packages,
        total_packages=len(packages),
        total_paczkomat_packages=total_paczkomat_packages,
        shipping_cost=money(gabaryt_cost + standard_cost),
        paczkomat_cost=paczkomat_cost,
        gabaryt_cost=gabaryt_cost,
        breakdown=breakdown,
        warnings=all_warnings,
        is_paczkomat_available=is_paczkomat_available,
    )


def cost_for_carrier(calculation: CalculationResult, carrier_id: str, rates: RateTable) -> Decimal:
    """
    Price the whole cart when one carrier is chosen for it.

    Oversized packages always travel with the forced carrier, so their cost
    is added to any regular carrier's price.

    Raises:
        UnknownCarrierError: carrier is unknown or not offered
        ShippingMethodUnavailableError: carrier cannot ship this cart
    """
    carrier = get_carrier(carrier_id)
    if not carrier.is_forced and carrier.carrier_code not in rates.enabled_carriers:
        raise UnknownCarrierError(
            f"Carrier {carrier.carrier_code.value} is not offered", carrier_id=carrier.carrier_code.value
        )

    if not calculation.packages:
        return ZERO

    if carrier.is_forced:
        standard = calculation.standard_packages
        if standard or not calculation.gabaryt_packages:
            raise ShippingMethodUnavailableError(
                f"{carrier.carrier_name} is available only for carts with oversized items only",
                carrier_id=carrier.carrier_code.value,
                package_id=standard[0].id if standard else None,
                reason=GABARYT_CARRIER_REASON,
            )
        return calculation.gabaryt_cost

    if carrier.carrier_code == CarrierCode.INPOST_PACZKOMAT and not calculation.is_paczkomat_available:
        raise ShippingMethodUnavailableError(
            "Produkty gabarytowe nie mogą być wysłane do paczkomatu.",
            carrier_id=carrier.carrier_code.value,
            package_id=calculation.gabaryt_packages[0].id,
            reason=PACZKOMAT_EXCLUDED_REASON,
        )

    for package in calculation.standard_packages:
        reason = carrier.unavailable_reason(package)
        if reason:
            raise ShippingMethodUnavailableError(
                f"{carrier.carrier_name} cannot ship package {package.id}",
                carrier_id=carrier.carrier_code.value,
                package_id=package.id,
                reason=reason,
            )

    return money(
        calculation.gabaryt_cost + sum_prices(carrier, calculation.standard_packages, rates)
    )
