"""
Base Carrier Interface

Every carrier offered at checkout implements this interface. Carriers are
stateless: availability and price depend only on the package and the
static rate table, never on the request.

Each carrier provides its own:
  - Display name and delivery estimate
  - Package eligibility (reason string when it cannot ship a package)
  - Package price
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from wbtrade_shipping.modules.shipping.domain import ZERO, CarrierCode, Package, money
from wbtrade_shipping.modules.shipping.rates import RateTable

GABARYT_ONLY_REASON = "Produkty gabarytowe wymagają wysyłki gabarytowej"
INPOST_ONLY_REASON = "Produkty w tej paczce można wysłać tylko przez InPost"
GABARYT_CARRIER_REASON = "Wysyłka gabarytowa dotyczy tylko produktów gabarytowych"


class BaseCarrier(ABC):
    """
    Abstract base class for checkout carriers.

    Subclasses set the class-level flags and implement the two properties.
    Override price_package() when a carrier does not bill a flat rate per
    package.
    """

    # InPost services remain available for INPOST_ONLY packages
    is_inpost: bool = False
    # Forced carriers are never chosen freely; they serve oversized packages
    is_forced: bool = False

    @property
    @abstractmethod
    def carrier_code(self) -> CarrierCode:
        """Return the carrier code enum value."""
        pass

    @property
    @abstractmethod
    def carrier_name(self) -> str:
        """Return the human-readable carrier name."""
        pass

    @property
    def estimated_delivery(self) -> str:
        return "1-3 dni robocze"

    def unavailable_reason(self, package: Package) -> Optional[str]:
        """
        Why this carrier cannot ship the package.

        Returns:
            None if the carrier can ship it, otherwise a customer-facing reason
        """
        if package.is_gabaryt:
            return None if self.is_forced else GABARYT_ONLY_REASON
        if self.is_forced:
            return GABARYT_CARRIER_REASON
        if package.is_inpost_only and not self.is_inpost:
            return INPOST_ONLY_REASON
        return None

    def supports(self, package: Package) -> bool:
        return self.unavailable_reason(package) is None

    def price_package(self, package: Package, rates: RateTable) -> Decimal:
        """Price of shipping one package; free-shipping packages cost nothing."""
        if package.has_free_shipping:
            return ZERO
        return money(self._base_price(package, rates))

    def _base_price(self, package: Package, rates: RateTable) -> Decimal:
        return rates.price_for(self.carrier_code)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.carrier_code.value}>"
