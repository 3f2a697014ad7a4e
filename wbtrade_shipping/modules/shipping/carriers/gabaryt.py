"""
Forced oversized-shipment carrier ("Wysyłka gabarytowa").

Ships gabaryt packages only. Each package is one unit billed at the price
from its gabaryt tag, or at this carrier's flat rate when the tag has none.
"""
from decimal import Decimal

from wbtrade_shipping.modules.shipping.carriers import register_carrier
from wbtrade_shipping.modules.shipping.carriers.base import BaseCarrier
from wbtrade_shipping.modules.shipping.domain import CarrierCode, Package
from wbtrade_shipping.modules.shipping.rates import RateTable


@register_carrier(CarrierCode.WYSYLKA_GABARYT)
class GabarytCarrier(BaseCarrier):
    is_forced = True

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.WYSYLKA_GABARYT

    @property
    def carrier_name(self) -> str:
        return "Wysyłka gabarytowa"

    @property
    def estimated_delivery(self) -> str:
        return "2-5 dni roboczych"

    def _base_price(self, package: Package, rates: RateTable) -> Decimal:
        if package.gabaryt_price is not None:
            return package.gabaryt_price
        return rates.gabaryt_fallback_price
