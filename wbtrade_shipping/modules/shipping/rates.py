"""
Static carrier rate table.

Flat PLN prices per carrier, snapshotted from settings once at startup.
The table is read-only so one instance can serve concurrent requests.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Tuple

from wbtrade_shipping.modules.shipping.domain import CarrierCode, money

DEFAULT_PRICES = {
    CarrierCode.INPOST_PACZKOMAT: Decimal("14.99"),
    CarrierCode.INPOST_KURIER: Decimal("19.99"),
    CarrierCode.DPD: Decimal("19.99"),
    CarrierCode.DHL: Decimal("24.99"),
    CarrierCode.GLS: Decimal("22.99"),
    CarrierCode.POCZTEX: Decimal("17.99"),
    CarrierCode.FEDEX: Decimal("29.99"),
    CarrierCode.UPS: Decimal("29.99"),
    CarrierCode.WYSYLKA_GABARYT: Decimal("49.99"),
}

DEFAULT_ENABLED = (
    CarrierCode.INPOST_PACZKOMAT,
    CarrierCode.INPOST_KURIER,
    CarrierCode.DPD,
    CarrierCode.DHL,
    CarrierCode.GLS,
    CarrierCode.POCZTEX,
)


def _freeze(prices: Mapping[CarrierCode, Decimal]) -> Mapping[CarrierCode, Decimal]:
    return MappingProxyType({CarrierCode(code): money(price) for code, price in prices.items()})


@dataclass(frozen=True)
class RateTable:
    """
    Flat rates per carrier.

    Attributes:
        prices: Price of one shipment per carrier. For INPOST_PACZKOMAT this
            is the price of one locker parcel.
        enabled_carriers: Regular carriers offered in menus, in display order.
            The oversized carrier is never listed; it is added when needed.
        default_carrier: Carrier used for the cart-level summary breakdown
        currency: ISO code shown next to prices
    """
    prices: Mapping[CarrierCode, Decimal] = field(default_factory=lambda: _freeze(DEFAULT_PRICES))
    enabled_carriers: Tuple[CarrierCode, ...] = DEFAULT_ENABLED
    default_carrier: CarrierCode = CarrierCode.INPOST_KURIER
    currency: str = "PLN"

    @classmethod
    def from_settings(cls, settings) -> "RateTable":
        prices = {
            CarrierCode.INPOST_PACZKOMAT: settings.SHIPPING_PRICE_INPOST_PACZKOMAT,
            CarrierCode.INPOST_KURIER: settings.SHIPPING_PRICE_INPOST_KURIER,
            CarrierCode.DPD: settings.SHIPPING_PRICE_DPD,
            CarrierCode.DHL: settings.SHIPPING_PRICE_DHL,
            CarrierCode.GLS: settings.SHIPPING_PRICE_GLS,
            CarrierCode.POCZTEX: settings.SHIPPING_PRICE_POCZTEX,
            CarrierCode.FEDEX: settings.SHIPPING_PRICE_FEDEX,
            CarrierCode.UPS: settings.SHIPPING_PRICE_UPS,
            CarrierCode.WYSYLKA_GABARYT: settings.SHIPPING_PRICE_GABARYT,
        }
        return cls(
            prices=_freeze(prices),
            enabled_carriers=tuple(CarrierCode(code) for code in settings.SHIPPING_ENABLED_CARRIERS),
            default_carrier=CarrierCode(settings.SHIPPING_DEFAULT_CARRIER),
            currency=settings.SHIPPING_CURRENCY,
        )

    def price_for(self, carrier_code: CarrierCode) -> Decimal:
        return self.prices[CarrierCode(carrier_code)]

    @property
    def paczkomat_price(self) -> Decimal:
        return self.price_for(CarrierCode.INPOST_PACZKOMAT)

    @property
    def default_price(self) -> Decimal:
        return self.price_for(self.default_carrier)

    @property
    def gabaryt_fallback_price(self) -> Decimal:
        """Per-unit oversized price when the gabaryt tag carries none."""
        return self.price_for(CarrierCode.WYSYLKA_GABARYT)
