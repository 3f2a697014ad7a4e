"""
Pytest configuration and fixtures for WB Trade shipping tests.
"""
import os
import pytest
from typing import Dict, List, Sequence
from unittest.mock import MagicMock, AsyncMock

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_wbtrade_shipping.db"
os.environ["DEBUG"] = "false"

from wbtrade_shipping.modules.shipping.domain import CartLineItem, ProductTagProfile  # noqa: E402
from wbtrade_shipping.modules.shipping.engine import ShippingEngine  # noqa: E402
from wbtrade_shipping.modules.shipping.rates import RateTable  # noqa: E402


class Catalog:
    """In-memory catalog: variant id -> product tag profile."""

    def __init__(self):
        self.profiles: Dict[str, ProductTagProfile] = {}

    def add(self, variant_id: str, tags: Sequence[str] = (), product_id: str = None, name: str = None):
        self.profiles[variant_id] = ProductTagProfile(
            product_id=product_id or f"p-{variant_id}",
            name=name or f"Produkt {variant_id}",
            tags=tuple(tags),
            image_url=f"https://cdn.example.com/{variant_id}.jpg",
        )
        return self


def cart(*lines) -> List[CartLineItem]:
    """cart(("v1", 2), ("v2", 1))"""
    return [CartLineItem(variant_id=variant_id, quantity=quantity) for variant_id, quantity in lines]


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def rates() -> RateTable:
    return RateTable()


@pytest.fixture
def engine(rates) -> ShippingEngine:
    """Engine with the storefront's default rate table and wholesalers."""
    return ShippingEngine(rates=rates)


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock async database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def mock_catalog_service(catalog) -> AsyncMock:
    """Catalog collaborator backed by the in-memory catalog fixture."""
    service = AsyncMock()

    async def fetch_tag_profiles(variant_ids):
        return {v: catalog.profiles[v] for v in dict.fromkeys(variant_ids) if v in catalog.profiles}

    service.fetch_tag_profiles = AsyncMock(side_effect=fetch_tag_profiles)
    return service
