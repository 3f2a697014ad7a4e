"""
Catalog models (read-only for the shipping engine)

Products carry free-text tags synced from the wholesaler feeds. Shipping
rules are derived from these tags (gabaryt, hurtownia, paczkomat limits,
delivery restrictions). Cart lines reference variants, so the engine
resolves variant -> product in one batched query.
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship

from wbtrade_shipping.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)

    # Ordered tag list; order matters for gabaryt price resolution
    tags = Column(JSON, default=list, nullable=False)

    # Media
    image_url = Column(String, nullable=True)

    # Soft delete (preserves order history)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    variants = relationship("ProductVariant", back_populates="product")


class ProductVariant(Base):
    __tablename__ = "product_variants"
    __table_args__ = (
        Index("ix_product_variants_product_id", "product_id"),
    )

    id = Column(String(36), primary_key=True, index=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    sku = Column(String(100), nullable=True, unique=True)
    name = Column(String, nullable=True)

    product = relationship("Product", back_populates="variants")
