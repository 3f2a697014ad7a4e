"""
Shipping Calculator Service

Request-level coordinator for checkout shipping:
- Fetches catalog tag profiles once per request (no per-item queries)
- Runs the pure shipping engine
- Logs the outcome

All business logic lives in wbtrade_shipping.modules.shipping; this layer only does I/O.
"""
import logging
from decimal import Decimal
from typing import Dict, Mapping, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from wbtrade_shipping.core.config import settings
from wbtrade_shipping.core.exceptions import CatalogError
from wbtrade_shipping.modules.shipping.domain import (
    CalculationResult,
    CartLineItem,
    CartShippingQuote,
    PerPackageShippingResult,
    ProductTagProfile,
)
from wbtrade_shipping.modules.shipping.engine import ShippingEngine
from wbtrade_shipping.modules.shipping.packaging import UNRESOLVED_VARIANT_WARNING
from wbtrade_shipping.services.catalog import CatalogService

logger = logging.getLogger(__name__)

_default_engine: Optional[ShippingEngine] = None


def get_shipping_engine() -> ShippingEngine:
    """Process-wide engine built from settings on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = ShippingEngine.from_settings(settings)
    return _default_engine


class ShippingCalculatorService:
    """
    Checkout shipping calculations for one request.
    """

    def __init__(
        self,
        db: AsyncSession,
        engine: Optional[ShippingEngine] = None,
        catalog: Optional[CatalogService] = None,
    ):
        self.db = db
        self.engine = engine or get_shipping_engine()
        self.catalog = catalog or CatalogService(db)

    async def _load_profiles(self, items: Sequence[CartLineItem]) -> Dict[str, ProductTagProfile]:
        if not items:
            return {}
        try:
            profiles = await self.catalog.fetch_tag_profiles(item.variant_id for item in items)
        except CatalogError as e:
            logger.error(f"Shipping calculation aborted, catalog unavailable: {e.message}")
            raise

        for item in items:
            if item.variant_id not in profiles:
                logger.warning(UNRESOLVED_VARIANT_WARNING.format(variant_id=item.variant_id))
        return profiles

    def _log_summary(self, result: CalculationResult) -> None:
        logger.info(
            f"Shipping calculated: {result.total_packages} packages "
            f"({len(result.gabaryt_packages)} gabaryt), "
            f"{result.total_paczkomat_packages} paczkomat parcels, "
            f"cost={result.shipping_cost} paczkomat={result.paczkomat_cost}"
        )

    async def calculate_shipping(self, items: Sequence[CartLineItem]) -> CalculationResult:
        """Packages and default pricing for the cart."""
        profiles = await self._load_profiles(items)
        result = self.engine.calculate(items, profiles)
        self._log_summary(result)
        return result

    async def quote_cart(self, items: Sequence[CartLineItem]) -> CartShippingQuote:
        """Calculation plus the whole-cart carrier menu."""
        profiles = await self._load_profiles(items)
        quote = self.engine.quote_cart(items, profiles)
        self._log_summary(quote.calculation)
        return quote

    async def get_shipping_options_per_package(
        self, items: Sequence[CartLineItem]
    ) -> PerPackageShippingResult:
        """Independent carrier menu and default selection per package."""
        profiles = await self._load_profiles(items)
        result = self.engine.package_options(items, profiles)
        logger.info(
            f"Per-package options: {len(result.packages_with_options)} packages, "
            f"default total={result.total_shipping_cost}"
        )
        return result

    async def calculate_shipping_cost(self, items: Sequence[CartLineItem], carrier_id: str) -> Decimal:
        """
        Cart price for one carrier.

        Raises:
            ShippingMethodUnavailableError: carrier cannot ship this cart
            UnknownCarrierError: carrier is unknown or not offered
        """
        profiles = await self._load_profiles(items)
        cost = self.engine.cost_for_carrier(items, profiles, carrier_id)
        logger.info(f"Shipping cost for {carrier_id}: {cost}")
        return cost

    async def quote_package_selections(
        self,
        items: Sequence[CartLineItem],
        selections: Mapping[str, str],
    ) -> PerPackageShippingResult:
        """
        Validate per-package carrier choices and total them.

        Raises:
            UnknownPackageError, UnknownCarrierError, ShippingMethodUnavailableError
        """
        profiles = await self._load_profiles(items)
        result = self.engine.quote_selections(items, profiles, selections)
        logger.info(
            f"Package selections accepted for {len(selections)} packages, "
            f"total={result.total_shipping_cost}"
        )
        return result
