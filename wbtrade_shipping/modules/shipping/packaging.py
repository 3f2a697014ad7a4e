"""
Package Builder

Splits resolved cart lines into physical shipments:

1. Free-shipping override (guard clause, see build_free_shipping_package)
2. Gabaryt lines -> one package per unit, in cart order
3. Standard lines -> one package per wholesaler bucket, buckets in order of
   first appearance; a bucket is never split

Package ids share one counter: gabaryt-1, gabaryt-2, standard-3, ...
"""
import logging
from math import ceil
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from wbtrade_shipping.modules.shipping.domain import (
    CartLineItem,
    Package,
    PackageItem,
    PackageKind,
    ProductTagProfile,
    ResolvedLineItem,
    ShippingAttributes,
    ShippingRestriction,
)
from wbtrade_shipping.modules.shipping.tags import TagClassifier

logger = logging.getLogger(__name__)

UNRESOLVED_VARIANT_WARNING = "Nie znaleziono produktu dla wariantu {variant_id}"
FREE_SHIPPING_NOTICE = "Darmowa dostawa: koszyk zawiera produkt testowy, koszt wysyłki wynosi 0 zł."


def resolve_line_items(
    items: Sequence[CartLineItem],
    profiles: Mapping[str, ProductTagProfile],
    classifier: TagClassifier,
) -> Tuple[List[ResolvedLineItem], List[str]]:
    """
    Join cart lines with catalog profiles and classify each product once.

    Args:
        items: Cart lines in cart order
        profiles: variant_id -> profile; missing keys are unresolved variants
        classifier: Tag classifier

    Returns:
        (resolved lines in cart order, warnings for unresolved variants)
    """
    resolved: List[ResolvedLineItem] = []
    warnings: List[str] = []
    attributes_by_product: Dict[str, ShippingAttributes] = {}

    for line in items:
        profile = profiles.get(line.variant_id)
        if profile is None:
            warnings.append(UNRESOLVED_VARIANT_WARNING.format(variant_id=line.variant_id))
            continue

        attributes = attributes_by_product.get(profile.product_id)
        if attributes is None:
            attributes = classifier.classify(profile.tags)
            attributes_by_product[profile.product_id] = attributes

        resolved.append(ResolvedLineItem(line=line, profile=profile, attributes=attributes))

    return resolved, warnings


def has_free_shipping_marker(resolved: Sequence[ResolvedLineItem], free_shipping_tag: str) -> bool:
    marker = free_shipping_tag.strip().lower()
    return any(
        tag.strip().lower() == marker
        for item in resolved
        for tag in item.profile.tags
        if isinstance(tag, str)
    )


def _package_item(item: ResolvedLineItem, quantity: int) -> PackageItem:
    return PackageItem(
        product_id=item.profile.product_id,
        name=item.profile.name,
        variant_id=item.line.variant_id,
        quantity=quantity,
        image_url=item.profile.image_url,
        is_gabaryt=item.attributes.is_gabaryt,
    )


def _paczkomat_count(items: Sequence[ResolvedLineItem]) -> int:
    # Limits are per product, never pooled across products
    return sum(ceil(item.line.quantity / item.attributes.paczkomat_unit_limit) for item in items)


def _is_inpost_only(items: Sequence[ResolvedLineItem]) -> bool:
    return any(item.attributes.restriction == ShippingRestriction.INPOST_ONLY for item in items)


def build_free_shipping_package(resolved: Sequence[ResolvedLineItem]) -> Package:
    """
    Test/demo escape hatch: everything ships together, for free.

    Triggered by the free-shipping tag on any product. Quantities are kept
    as ordered and oversized items stay flagged on their lines, but no
    gabaryt packages are produced and no carrier charges anything.
    """
    return Package(
        id="standard-1",
        kind=PackageKind.STANDARD,
        wholesaler_id=None,
        items=[_package_item(item, item.line.quantity) for item in resolved],
        paczkomat_package_count=_paczkomat_count(resolved),
        is_paczkomat_available=True,
        is_inpost_only=_is_inpost_only(resolved),
        has_free_shipping=True,
    )


def build_packages(
    resolved: Sequence[ResolvedLineItem],
    free_shipping_tag: Optional[str] = None,
) -> Tuple[List[Package], List[str]]:
    """
    Build packages for resolved cart lines.

    Returns:
        (packages, notices)
    """
    if not resolved:
        return [], []

    if free_shipping_tag and has_free_shipping_marker(resolved, free_shipping_tag):
        logger.debug("Free-shipping marker present, bypassing package rules")
        return [build_free_shipping_package(resolved)], [FREE_SHIPPING_NOTICE]

    gabaryt_items: List[ResolvedLineItem] = []
    buckets: Dict[Optional[str], List[ResolvedLineItem]] = {}

    for item in resolved:
        if item.attributes.is_gabaryt:
            gabaryt_items.append(item)
        else:
            buckets.setdefault(item.attributes.wholesaler_id, []).append(item)

    packages: List[Package] = []
    next_id = 1

    for item in gabaryt_items:
        for _ in range(item.line.quantity):
            packages.append(Package(
                id=f"gabaryt-{next_id}",
                kind=PackageKind.GABARYT,
                wholesaler_id=item.attributes.wholesaler_id,
                items=[_package_item(item, 1)],
                paczkomat_package_count=0,
                gabaryt_price=item.attributes.gabaryt_unit_price,
                is_paczkomat_available=False,
                is_inpost_only=False,
            ))
            next_id += 1

    for wholesaler_id, items in buckets.items():
        packages.append(Package(
            id=f"standard-{next_id}",
            kind=PackageKind.STANDARD,
            wholesaler_id=wholesaler_id,
            items=[_package_item(item, item.line.quantity) for item in items],
            paczkomat_package_count=_paczkomat_count(items),
            is_paczkomat_available=True,
            is_inpost_only=_is_inpost_only(items),
        ))
        next_id += 1

    logger.debug(
        f"Built {len(packages)} packages "
        f"({len(packages) - len(buckets)} gabaryt, {len(buckets)} standard)"
    )
    return packages, []
