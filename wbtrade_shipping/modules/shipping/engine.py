"""
Shipping engine facade.

Pure, synchronous entry points over the pipeline stages. Inputs are the
cart lines and the already-fetched catalog profiles, so identical inputs
always produce identical results and one engine can be shared freely.
"""
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from wbtrade_shipping.modules.shipping.costs import calculate_costs, cost_for_carrier
from wbtrade_shipping.modules.shipping.domain import (
    CalculationResult,
    CartLineItem,
    CartShippingQuote,
    PerPackageShippingResult,
    ProductTagProfile,
)
from wbtrade_shipping.modules.shipping.options import (
    apply_package_selections,
    resolve_cart_options,
    resolve_package_options,
)
from wbtrade_shipping.modules.shipping.packaging import build_packages, resolve_line_items
from wbtrade_shipping.modules.shipping.rates import RateTable
from wbtrade_shipping.modules.shipping.tags import TagClassifier

Profiles = Mapping[str, ProductTagProfile]


class ShippingEngine:

    def __init__(
        self,
        rates: Optional[RateTable] = None,
        classifier: Optional[TagClassifier] = None,
        free_shipping_tag: Optional[str] = "testowy",
    ):
        self.rates = rates or RateTable()
        self.classifier = classifier or TagClassifier()
        self.free_shipping_tag = free_shipping_tag

    @classmethod
    def from_settings(cls, settings) -> "ShippingEngine":
        return cls(
            rates=RateTable.from_settings(settings),
            classifier=TagClassifier.from_settings(settings),
            free_shipping_tag=settings.SHIPPING_FREE_SHIPPING_TAG,
        )

    def calculate(self, items: Sequence[CartLineItem], profiles: Profiles) -> CalculationResult:
        resolved, warnings = resolve_line_items(items, profiles, self.classifier)
        packages, notices = build_packages(resolved, self.free_shipping_tag)
        return calculate_costs(packages, self.rates, warnings + notices)

    def quote_cart(self, items: Sequence[CartLineItem], profiles: Profiles) -> CartShippingQuote:
        calculation = self.calculate(items, profiles)
        return CartShippingQuote(
            calculation=calculation,
            shipping_methods=resolve_cart_options(calculation, self.rates),
        )

    def package_options(self, items: Sequence[CartLineItem], profiles: Profiles) -> PerPackageShippingResult:
        return resolve_package_options(self.calculate(items, profiles), self.rates)

    def cost_for_carrier(self, items: Sequence[CartLineItem], profiles: Profiles, carrier_id: str) -> Decimal:
        return cost_for_carrier(self.calculate(items, profiles), carrier_id, self.rates)

    def quote_selections(
        self,
        items: Sequence[CartLineItem],
        profiles: Profiles,
        selections: Mapping[str, str],
    ) -> PerPackageShippingResult:
        return apply_package_selections(self.package_options(items, profiles), selections)
