"""
InPost carriers: parcel lockers (Paczkomat) and courier.

Paczkomat is the only carrier that does not bill flat per package. A
logical package expands into paczkomat_package_count locker parcels, each
billed at the paczkomat rate.
"""
from decimal import Decimal

from wbtrade_shipping.modules.shipping.carriers import register_carrier
from wbtrade_shipping.modules.shipping.carriers.base import BaseCarrier
from wbtrade_shipping.modules.shipping.domain import CarrierCode, Package
from wbtrade_shipping.modules.shipping.rates import RateTable


@register_carrier(CarrierCode.INPOST_PACZKOMAT)
class InPostPaczkomatCarrier(BaseCarrier):
    is_inpost = True

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.INPOST_PACZKOMAT

    @property
    def carrier_name(self) -> str:
        return "InPost Paczkomat"

    @property
    def estimated_delivery(self) -> str:
        return "1-2 dni robocze"

    def _base_price(self, package: Package, rates: RateTable) -> Decimal:
        # A package always occupies at least one locker
        parcels = max(package.paczkomat_package_count, 1)
        return rates.paczkomat_price * parcels


@register_carrier(CarrierCode.INPOST_KURIER)
class InPostKurierCarrier(BaseCarrier):
    is_inpost = True

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.INPOST_KURIER

    @property
    def carrier_name(self) -> str:
        return "Kurier InPost"

    @property
    def estimated_delivery(self) -> str:
        return "1-2 dni robocze"
