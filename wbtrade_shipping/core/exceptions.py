"""
WB Trade Shipping Exception Hierarchy

Structured exception classes for the shipping engine and its collaborators.
All exceptions include code, message, and details for audit trail and
debugging.

Exception Hierarchy:
    WBTradeBaseError
    ├── ShippingError
    │   ├── ShippingMethodUnavailableError
    │   ├── UnknownCarrierError
    │   └── UnknownPackageError
    └── CatalogError
        └── CatalogLookupError

Business rules never raise for well-formed carts. ShippingError subclasses
are raised only when a caller asks for something the cart cannot have
(e.g. paczkomat for an oversized item). CatalogError is infrastructure
failure and always propagates to the caller.
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class WBTradeBaseError(Exception):
    """
    Base exception for all WB Trade custom errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging/audit
        severity: P0-P3 severity level
    """

    default_code: str = "WBTRADE_ERROR"
    default_severity: str = "P2"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[str] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.severity = severity or self.default_severity
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# SHIPPING ERRORS
# =============================================================================

class ShippingError(WBTradeBaseError):
    """Base exception for shipping-related errors."""
    default_code = "SHIPPING_ERROR"
    default_severity = "P2"


class ShippingMethodUnavailableError(ShippingError):
    """Selected carrier cannot ship the cart (or one of its packages)."""
    default_code = "SHIPPING_METHOD_UNAVAILABLE"

    def __init__(
        self,
        message: str,
        carrier_id: Optional[str] = None,
        package_id: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details.update({
            "carrier_id": carrier_id,
            "package_id": package_id,
            "reason": reason,
        })
        super().__init__(message, details=details, **kwargs)


class UnknownCarrierError(ShippingError):
    """Carrier id is not registered or not enabled."""
    default_code = "SHIPPING_UNKNOWN_CARRIER"

    def __init__(self, message: str, carrier_id: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["carrier_id"] = carrier_id
        super().__init__(message, details=details, **kwargs)


class UnknownPackageError(ShippingError):
    """Package id does not belong to the calculated cart."""
    default_code = "SHIPPING_UNKNOWN_PACKAGE"

    def __init__(self, message: str, package_id: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["package_id"] = package_id
        super().__init__(message, details=details, **kwargs)


# =============================================================================
# CATALOG ERRORS
# =============================================================================

class CatalogError(WBTradeBaseError):
    """Base exception for catalog collaborator errors."""
    default_code = "CATALOG_ERROR"
    default_severity = "P1"


class CatalogLookupError(CatalogError):
    """Batch lookup of product tag profiles failed."""
    default_code = "CATALOG_LOOKUP_FAILED"

    def __init__(
        self,
        message: str,
        variant_count: Optional[int] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        details["variant_count"] = variant_count
        super().__init__(message, details=details, **kwargs)
