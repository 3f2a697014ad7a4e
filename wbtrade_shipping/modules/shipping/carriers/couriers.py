"""
Flat-rate courier services.

All of them bill one flat rate per package and ship anything except
oversized items and InPost-only packages.
"""
from wbtrade_shipping.modules.shipping.carriers import register_carrier
from wbtrade_shipping.modules.shipping.carriers.base import BaseCarrier
from wbtrade_shipping.modules.shipping.domain import CarrierCode


@register_carrier(CarrierCode.DPD)
class DPDCarrier(BaseCarrier):

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.DPD

    @property
    def carrier_name(self) -> str:
        return "Kurier DPD"

    @property
    def estimated_delivery(self) -> str:
        return "1-2 dni robocze"


@register_carrier(CarrierCode.DHL)
class DHLCarrier(BaseCarrier):

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.DHL

    @property
    def carrier_name(self) -> str:
        return "Kurier DHL"

    @property
    def estimated_delivery(self) -> str:
        return "1-2 dni robocze"


@register_carrier(CarrierCode.GLS)
class GLSCarrier(BaseCarrier):

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.GLS

    @property
    def carrier_name(self) -> str:
        return "Kurier GLS"


@register_carrier(CarrierCode.POCZTEX)
class PocztexCarrier(BaseCarrier):

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.POCZTEX

    @property
    def carrier_name(self) -> str:
        return "Pocztex Kurier48"

    @property
    def estimated_delivery(self) -> str:
        return "2-3 dni robocze"


@register_carrier(CarrierCode.FEDEX)
class FedExCarrier(BaseCarrier):

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.FEDEX

    @property
    def carrier_name(self) -> str:
        return "FedEx"


@register_carrier(CarrierCode.UPS)
class UPSCarrier(BaseCarrier):

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.UPS

    @property
    def carrier_name(self) -> str:
        return "UPS"
