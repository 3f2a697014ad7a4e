"""
Catalog collaborator for the shipping engine.

Resolves cart variant ids to product tag profiles in ONE batched query.
Unresolved ids (unknown or soft-deleted products) are simply absent from
the result; the engine warns about them.
"""
import logging
from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wbtrade_shipping.core.exceptions import CatalogLookupError
from wbtrade_shipping.models.product import Product, ProductVariant
from wbtrade_shipping.modules.shipping.domain import ProductTagProfile

logger = logging.getLogger(__name__)


class CatalogService:
    """Read-only catalog lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_tag_profiles(self, variant_ids: Iterable[str]) -> Dict[str, ProductTagProfile]:
        """
        Batch-fetch tag profiles for variants.

        Args:
            variant_ids: Variant ids from the cart (duplicates allowed)

        Returns:
            variant_id -> ProductTagProfile for every resolved variant

        Raises:
            CatalogLookupError: the database query failed
        """
        unique_ids: List[str] = list(dict.fromkeys(variant_ids))
        if not unique_ids:
            return {}

        stmt = (
            select(
                ProductVariant.id.label("variant_id"),
                Product.id.label("product_id"),
                Product.name,
                Product.tags,
                Product.image_url,
            )
            .join(Product, ProductVariant.product_id == Product.id)
            .where(
                ProductVariant.id.in_(unique_ids),
                Product.deleted_at.is_(None),
            )
        )

        try:
            result = await self.db.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Catalog lookup failed for {len(unique_ids)} variants: {e}")
            raise CatalogLookupError(
                "Could not load product data for shipping calculation",
                variant_count=len(unique_ids),
            ) from e

        profiles = {}
        for row in rows:
            profiles[row.variant_id] = ProductTagProfile(
                product_id=row.product_id,
                name=row.name,
                tags=tuple(tag for tag in (row.tags or []) if isinstance(tag, str)),
                image_url=row.image_url,
            )

        logger.debug(f"Resolved {len(profiles)}/{len(unique_ids)} variants")
        return profiles
