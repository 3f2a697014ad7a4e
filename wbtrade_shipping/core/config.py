"""
Application configuration

SECURITY: Defaults are fail-safe for production.
- DEBUG defaults to False
- DATABASE_URL has no default (will fail if not set)
- Runtime validation catches insecure configurations

Shipping rates are flat PLN prices per carrier. They are read once into an
immutable RateTable (see wbtrade_shipping.modules.shipping.rates) and never mutated at
request time.
"""
import json
import os
import logging
from decimal import Decimal
from typing import List, Union
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wbtrade_shipping.modules.shipping.domain import CarrierCode

logger = logging.getLogger(__name__)

DEFAULT_ENABLED_CARRIERS = [
    "inpost_paczkomat",
    "inpost_kurier",
    "dpd",
    "dhl",
    "gls",
    "pocztex",
]

DEFAULT_KNOWN_WHOLESALERS = [
    "Ikonka",
    "BTP",
    "HP",
    "Gastro",
    "Horeca",
    "Hurtownia Przemysłowa",
    "Leker",
    "Forcetop",
]

OVERSIZED_CARRIER_ID = "wysylka_gabaryt"


def _parse_str_list(v, default: List[str]) -> List[str]:
    """Accept a JSON array or a comma-separated string."""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if not v or v.strip() == "":
            return list(default)
        if v.startswith("["):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App - defaults are PRODUCTION safe
    APP_NAME: str = "WB Trade Shipping"
    DEBUG: bool = False  # SECURE DEFAULT: off in production
    ENVIRONMENT: str = "production"  # Explicit env marker
    LOG_LEVEL: str = "INFO"

    # Database - NO DEFAULT (will fail if not set)
    DATABASE_URL: str

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def convert_database_url(cls, v):
        """Convert plain postgres:// URLs to asyncpg format."""
        if not v:
            return v
        if v.startswith("postgres://"):
            v = v.replace("postgres://", "postgresql+asyncpg://", 1)
        elif v.startswith("postgresql://") and "+asyncpg" not in v:
            v = v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Database Pool Configuration
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600  # 1 hour

    # ===== SHIPPING RATE TABLE (PLN, flat per package) =====
    SHIPPING_CURRENCY: str = "PLN"
    SHIPPING_PRICE_INPOST_PACZKOMAT: Decimal = Decimal("14.99")  # per locker parcel
    SHIPPING_PRICE_INPOST_KURIER: Decimal = Decimal("19.99")
    SHIPPING_PRICE_DPD: Decimal = Decimal("19.99")
    SHIPPING_PRICE_DHL: Decimal = Decimal("24.99")
    SHIPPING_PRICE_GLS: Decimal = Decimal("22.99")
    SHIPPING_PRICE_POCZTEX: Decimal = Decimal("17.99")
    SHIPPING_PRICE_FEDEX: Decimal = Decimal("29.99")
    SHIPPING_PRICE_UPS: Decimal = Decimal("29.99")
    # Forced oversized carrier; also the per-unit price for gabaryt tags without a price
    SHIPPING_PRICE_GABARYT: Decimal = Decimal("49.99")

    # Carriers offered in menus - accepts JSON array or comma-separated string
    SHIPPING_ENABLED_CARRIERS: Union[str, List[str]] = DEFAULT_ENABLED_CARRIERS
    SHIPPING_DEFAULT_CARRIER: str = "inpost_kurier"  # Cart-level breakdown carrier

    # ===== TAG CLASSIFICATION =====
    SHIPPING_DEFAULT_PACZKOMAT_LIMIT: int = 10
    SHIPPING_KNOWN_WHOLESALERS: Union[str, List[str]] = DEFAULT_KNOWN_WHOLESALERS
    SHIPPING_FREE_SHIPPING_TAG: str = "testowy"  # Demo/test products ship for free

    @field_validator("SHIPPING_ENABLED_CARRIERS", mode="before")
    @classmethod
    def parse_enabled_carriers(cls, v):
        return _parse_str_list(v, DEFAULT_ENABLED_CARRIERS)

    @field_validator("SHIPPING_KNOWN_WHOLESALERS", mode="before")
    @classmethod
    def parse_known_wholesalers(cls, v):
        return _parse_str_list(v, DEFAULT_KNOWN_WHOLESALERS)

    @model_validator(mode="after")
    def validate_shipping_config(self):
        """Reject rate tables and carrier lists the engine cannot price."""
        errors = []

        for name in (
            "SHIPPING_PRICE_INPOST_PACZKOMAT",
            "SHIPPING_PRICE_INPOST_KURIER",
            "SHIPPING_PRICE_DPD",
            "SHIPPING_PRICE_DHL",
            "SHIPPING_PRICE_GLS",
            "SHIPPING_PRICE_POCZTEX",
            "SHIPPING_PRICE_FEDEX",
            "SHIPPING_PRICE_UPS",
            "SHIPPING_PRICE_GABARYT",
        ):
            if getattr(self, name) < 0:
                errors.append(f"{name} must not be negative")

        if self.SHIPPING_DEFAULT_PACZKOMAT_LIMIT < 1:
            errors.append("SHIPPING_DEFAULT_PACZKOMAT_LIMIT must be at least 1")

        known_carriers = {code.value for code in CarrierCode}
        for carrier_id in self.SHIPPING_ENABLED_CARRIERS:
            if carrier_id not in known_carriers:
                errors.append(f"SHIPPING_ENABLED_CARRIERS contains unknown carrier '{carrier_id}'")
        if self.SHIPPING_DEFAULT_CARRIER not in known_carriers:
            errors.append(f"SHIPPING_DEFAULT_CARRIER '{self.SHIPPING_DEFAULT_CARRIER}' is not a known carrier")

        if OVERSIZED_CARRIER_ID in self.SHIPPING_ENABLED_CARRIERS:
            errors.append(
                f"{OVERSIZED_CARRIER_ID} is always offered for oversized items "
                "and must not be listed in SHIPPING_ENABLED_CARRIERS"
            )

        if self.SHIPPING_DEFAULT_CARRIER not in self.SHIPPING_ENABLED_CARRIERS:
            errors.append(
                f"SHIPPING_DEFAULT_CARRIER '{self.SHIPPING_DEFAULT_CARRIER}' "
                "is not in SHIPPING_ENABLED_CARRIERS"
            )

        if not self.SHIPPING_FREE_SHIPPING_TAG.strip():
            errors.append("SHIPPING_FREE_SHIPPING_TAG must not be empty")

        if errors:
            raise ValueError(
                "SHIPPING CONFIGURATION ERRORS:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        return self

    @model_validator(mode="after")
    def validate_production_config(self):
        """Runtime validation to catch insecure production configurations."""
        if self.ENVIRONMENT == "production":
            errors = []

            if self.DEBUG:
                errors.append(
                    "DEBUG=True is forbidden in production. "
                    "Set DEBUG=false or ENVIRONMENT=development"
                )

            if "localhost" in self.DATABASE_URL or "127.0.0.1" in self.DATABASE_URL:
                errors.append(
                    "Localhost DATABASE_URL detected in production. "
                    "Configure proper database connection."
                )

            if errors:
                raise ValueError(
                    "PRODUCTION SECURITY VIOLATIONS:\n" + "\n".join(f"  - {e}" for e in errors)
                )

        return self


# Try to load settings, provide helpful error on failure
try:
    settings = Settings()
except Exception:
    # In development, allow fallback defaults
    if os.getenv("ENVIRONMENT", "development") == "development":
        logger.warning(
            "Settings validation failed, using development defaults. "
            "Set DATABASE_URL in .env file."
        )
        os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./wbtrade_shipping.db")
        os.environ.setdefault("ENVIRONMENT", "development")
        settings = Settings()
    else:
        raise
