"""
Carrier Registry

- Carrier classes register themselves with @register_carrier(CarrierCode.X)
- Carriers are stateless, so the registry hands out one shared instance each
- Which carriers a customer sees is decided by the RateTable, not here
"""
from typing import Dict, Iterable, List, Type
import logging

from wbtrade_shipping.core.exceptions import UnknownCarrierError
from wbtrade_shipping.modules.shipping.carriers.base import BaseCarrier
from wbtrade_shipping.modules.shipping.domain import CarrierCode

logger = logging.getLogger(__name__)

# Registry of carrier implementations
_CARRIER_REGISTRY: Dict[CarrierCode, Type[BaseCarrier]] = {}
_CARRIER_INSTANCES: Dict[CarrierCode, BaseCarrier] = {}


def register_carrier(carrier_code: CarrierCode):
    """
    Decorator to register a carrier implementation.

    Usage:
        @register_carrier(CarrierCode.DPD)
        class DPDCarrier(BaseCarrier):
            ...
    """
    def decorator(cls: Type[BaseCarrier]):
        _CARRIER_REGISTRY[carrier_code] = cls
        _CARRIER_INSTANCES.pop(carrier_code, None)
        logger.debug(f"Registered carrier: {carrier_code.value} -> {cls.__name__}")
        return cls
    return decorator


def get_carrier(carrier_code) -> BaseCarrier:
    """
    Get the carrier implementation for a code.

    Args:
        carrier_code: CarrierCode or its string value

    Raises:
        UnknownCarrierError: code is not a known carrier or has no implementation
    """
    try:
        code = CarrierCode(carrier_code)
    except ValueError:
        raise UnknownCarrierError(
            f"Unknown carrier: {carrier_code}", carrier_id=str(carrier_code)
        )

    carrier = _CARRIER_INSTANCES.get(code)
    if carrier is None:
        carrier_cls = _CARRIER_REGISTRY.get(code)
        if carrier_cls is None:
            raise UnknownCarrierError(
                f"No implementation registered for carrier: {code.value}", carrier_id=code.value
            )
        carrier = _CARRIER_INSTANCES[code] = carrier_cls()
    return carrier


def get_carriers(carrier_codes: Iterable[CarrierCode]) -> List[BaseCarrier]:
    """Carrier instances in the given order."""
    return [get_carrier(code) for code in carrier_codes]


def get_registered_carriers() -> List[CarrierCode]:
    """Get list of all registered carrier codes."""
    return list(_CARRIER_REGISTRY.keys())


def get_forced_carrier() -> BaseCarrier:
    """The oversized-shipment carrier."""
    return get_carrier(CarrierCode.WYSYLKA_GABARYT)


# Import carriers to trigger registration
# These imports must be at the bottom to avoid circular imports
from wbtrade_shipping.modules.shipping.carriers.inpost import InPostKurierCarrier, InPostPaczkomatCarrier  # noqa: E402, F401
from wbtrade_shipping.modules.shipping.carriers.couriers import (  # noqa: E402, F401
    DHLCarrier,
    DPDCarrier,
    FedExCarrier,
    GLSCarrier,
    PocztexCarrier,
    UPSCarrier,
)
from wbtrade_shipping.modules.shipping.carriers.gabaryt import GabarytCarrier  # noqa: E402, F401
