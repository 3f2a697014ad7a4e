"""
Tag Classifier

Turns a product's free-text tag list into ShippingAttributes.

Each attribute category owns an ordered table of TagRule entries. A rule is
a predicate (anchored, case-insensitive regex) plus an extractor that turns
the regex match into a typed value. A rule yields either NO_MATCH or
Matched(value). Categories never look at each other's rules.

Resolution order:
    for rule in category rules (priority order):
        for tag in tags (list order):
            first Matched wins

Recognized tags (case/spacing-insensitive):
    "Gabaryt", "149.00 Gabaryt"        -> oversized, optional unit price
    "Tylko kurier"                     -> oversized + COURIER_ONLY
    "Paczkomaty i Kurier" (variants)   -> INPOST_ONLY
    "hurtownia:X", known wholesaler    -> wholesaler bucket
    "3 produkty w paczce",
    "produkt w paczce: 3"              -> paczkomat unit limit
    "do 31,5 kg"                       -> informational weight limit

Malformed numbers never fail classification; the attribute keeps its default.
"""
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar, Union

from wbtrade_shipping.modules.shipping.domain import ShippingAttributes, ShippingRestriction

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_KNOWN_WHOLESALERS = (
    "Ikonka",
    "BTP",
    "HP",
    "Gastro",
    "Horeca",
    "Hurtownia Przemysłowa",
    "Leker",
    "Forcetop",
)

# Largest price or weight a tag may carry; keeps money() within Decimal precision
MAX_TAG_AMOUNT = Decimal("999999999.99")


# =============================================================================
# Match results
# =============================================================================

class NoMatch:
    """Rule did not apply to the tag."""

    _instance: Optional["NoMatch"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()


@dataclass(frozen=True)
class Matched(Generic[T]):
    """Rule applied and extracted a value."""
    value: T


TagMatch = Union[NoMatch, Matched]


# =============================================================================
# Rules
# =============================================================================

@dataclass(frozen=True)
class TagRule:
    """
    One tag recognition rule.

    Attributes:
        name: Short identifier used in debug logs
        pattern: Compiled regex; must match the whole (stripped) tag
        extractor: Turns the match into a TagMatch; may return NO_MATCH
            to reject a match whose numeric fragment is malformed
    """
    name: str
    pattern: "re.Pattern[str]"
    extractor: Callable[["re.Match[str]"], TagMatch]

    def predicate(self, tag: str) -> Optional["re.Match[str]"]:
        return self.pattern.fullmatch(tag.strip())

    def match(self, tag: str) -> TagMatch:
        found = self.predicate(tag)
        if found is None:
            return NO_MATCH
        return self.extractor(found)


def resolve(tags: Sequence[str], rules: Iterable[TagRule]) -> TagMatch:
    """First Matched result, rules in priority order, tags in list order."""
    for rule in rules:
        for tag in tags:
            result = rule.match(tag)
            if isinstance(result, Matched):
                logger.debug(f"Tag {tag!r} matched rule {rule.name}: {result.value!r}")
                return result
    return NO_MATCH


def _parse_decimal(raw: Optional[str]) -> Optional[Decimal]:
    """Parse '149.00' or '149,00'; None for anything else, including amounts above MAX_TAG_AMOUNT."""
    if not raw:
        return None
    try:
        value = Decimal(raw.replace(",", "."))
    except InvalidOperation:
        return None
    if not value.is_finite() or value > MAX_TAG_AMOUNT:
        return None
    return value


def _parse_positive_int(raw: Optional[str]) -> Optional[int]:
    if not raw or not raw.isdigit():
        return None
    value = int(raw)
    return value if value > 0 else None


def _const(value: Any) -> Callable[["re.Match[str]"], TagMatch]:
    return lambda _match: Matched(value)


def _extract_gabaryt_price(found: "re.Match[str]") -> TagMatch:
    price = _parse_decimal(found.group("price"))
    if price is None or price <= 0:
        return NO_MATCH
    return Matched(price)


def _extract_paczkomat_limit(found: "re.Match[str]") -> TagMatch:
    limit = _parse_positive_int(found.group("suffixed") or found.group("prefixed"))
    return Matched(limit) if limit is not None else NO_MATCH


def _extract_weight(found: "re.Match[str]") -> TagMatch:
    weight = _parse_decimal(found.group("kg"))
    return Matched(weight) if weight is not None and weight > 0 else NO_MATCH


GABARYT_PATTERN = re.compile(r"(?:(?P<price>[\d.,]+)\s*)?gabaryt", re.IGNORECASE)
COURIER_ONLY_PATTERN = re.compile(r"tylko\s*kurier", re.IGNORECASE)
INPOST_ONLY_PATTERN = re.compile(r"paczkomaty?\s*i\s*kurier", re.IGNORECASE)
PACZKOMAT_LIMIT_PATTERN = re.compile(
    r"(?:produkt\s*w\s*paczce[:\s]*(?P<suffixed>[\d.,]+)"
    r"|(?P<prefixed>[\d.,]+)\s*produkt(?:y|ów|ow)?\s*w\s*paczce)",
    re.IGNORECASE,
)
WEIGHT_PATTERN = re.compile(r"do\s*(?P<kg>[\d.,]+)\s*kg", re.IGNORECASE)
WHOLESALER_PREFIX_PATTERN = re.compile(r"hurtownia[:\-_]\s*(?P<name>\S.*)", re.IGNORECASE)

PRICED_GABARYT_RULE = TagRule("gabaryt_price", GABARYT_PATTERN, _extract_gabaryt_price)

GABARYT_RULES = (
    TagRule("gabaryt", GABARYT_PATTERN, _const(True)),
    TagRule("tylko_kurier", COURIER_ONLY_PATTERN, _const(True)),
)

# Most restrictive first
RESTRICTION_RULES = (
    TagRule("tylko_kurier", COURIER_ONLY_PATTERN, _const(ShippingRestriction.COURIER_ONLY)),
    TagRule("paczkomaty_i_kurier", INPOST_ONLY_PATTERN, _const(ShippingRestriction.INPOST_ONLY)),
)

PACZKOMAT_LIMIT_RULES = (
    TagRule("paczkomat_limit", PACZKOMAT_LIMIT_PATTERN, _extract_paczkomat_limit),
)

WEIGHT_RULES = (
    TagRule("weight_kg", WEIGHT_PATTERN, _extract_weight),
)


def _wholesaler_rule(known_wholesalers: Iterable[str]) -> TagRule:
    """
    Single rule so wholesaler tags resolve in tag order.

    "hurtownia:X" keeps X as written; a bare known name resolves to its
    configured spelling.
    """
    canonical = {name.strip().lower(): name.strip() for name in known_wholesalers if name.strip()}
    names = "|".join(re.escape(name) for name in sorted(canonical, key=len, reverse=True))
    alternatives = [WHOLESALER_PREFIX_PATTERN.pattern]
    if names:
        alternatives.append(rf"(?P<known>{names})")
    pattern = re.compile("|".join(f"(?:{alt})" for alt in alternatives), re.IGNORECASE)

    def extract(found: "re.Match[str]") -> TagMatch:
        prefixed = found.group("name")
        if prefixed:
            return Matched(prefixed.strip())
        known = found.groupdict().get("known")
        if known:
            return Matched(canonical[known.lower()])
        return NO_MATCH

    return TagRule("wholesaler", pattern, extract)


# =============================================================================
# Classifier
# =============================================================================

class TagClassifier:
    """
    Classifies tag lists into ShippingAttributes.

    Holds only immutable configuration; safe to share between requests.
    """

    def __init__(
        self,
        known_wholesalers: Iterable[str] = DEFAULT_KNOWN_WHOLESALERS,
        default_paczkomat_limit: int = 10,
    ):
        self.default_paczkomat_limit = default_paczkomat_limit
        self._wholesaler_rules = (_wholesaler_rule(known_wholesalers),)

    @classmethod
    def from_settings(cls, settings) -> "TagClassifier":
        return cls(
            known_wholesalers=settings.SHIPPING_KNOWN_WHOLESALERS,
            default_paczkomat_limit=settings.SHIPPING_DEFAULT_PACZKOMAT_LIMIT,
        )

    def classify(self, tags: Sequence[str]) -> ShippingAttributes:
        tags = [tag for tag in tags if isinstance(tag, str) and tag.strip()]
        if not tags:
            return ShippingAttributes(paczkomat_unit_limit=self.default_paczkomat_limit)

        is_gabaryt = isinstance(resolve(tags, GABARYT_RULES), Matched)
        price = resolve(tags, (PRICED_GABARYT_RULE,)) if is_gabaryt else NO_MATCH
        wholesaler = resolve(tags, self._wholesaler_rules)
        limit = resolve(tags, PACZKOMAT_LIMIT_RULES)
        restriction = resolve(tags, RESTRICTION_RULES)
        weight = resolve(tags, WEIGHT_RULES)

        return ShippingAttributes(
            is_gabaryt=is_gabaryt,
            gabaryt_unit_price=price.value if isinstance(price, Matched) else None,
            wholesaler_id=wholesaler.value if isinstance(wholesaler, Matched) else None,
            paczkomat_unit_limit=(
                limit.value if isinstance(limit, Matched) else self.default_paczkomat_limit
            ),
            restriction=(
                restriction.value if isinstance(restriction, Matched) else ShippingRestriction.NONE
            ),
            weight_limit_kg=weight.value if isinstance(weight, Matched) else None,
        )
