"""
Tests for the product tag classifier.
"""
from decimal import Decimal

import pytest

from wbtrade_shipping.modules.shipping.domain import ShippingAttributes, ShippingRestriction
from wbtrade_shipping.modules.shipping.tags import NO_MATCH, Matched, TagClassifier, resolve, GABARYT_RULES
from tests.conftest import cart


@pytest.fixture
def classifier() -> TagClassifier:
    return TagClassifier()


class TestDefaults:

    def test_no_tags_is_plain_standard_product(self, classifier):
        assert classifier.classify([]) == ShippingAttributes()

    def test_unrelated_tags_are_ignored(self, classifier):
        attrs = classifier.classify(["promocja", "nowość", "", "  "])
        assert attrs == ShippingAttributes()

    def test_custom_default_paczkomat_limit(self):
        classifier = TagClassifier(default_paczkomat_limit=4)
        assert classifier.classify([]).paczkomat_unit_limit == 4
        assert classifier.classify(["promocja"]).paczkomat_unit_limit == 4

    def test_same_tags_give_equal_attributes(self, classifier):
        tags = ["149.00 Gabaryt", "hurtownia:Ikonka", "3 produkty w paczce"]
        assert classifier.classify(tags) == classifier.classify(list(tags))


class TestGabaryt:

    @pytest.mark.parametrize(
        "tag, expected_price",
        [
            ("Gabaryt", None),
            ("gabaryt", None),
            ("GABARYT", None),
            ("149.00 Gabaryt", Decimal("149.00")),
            ("149 gabaryt", Decimal("149")),
            ("89,50 Gabaryt", Decimal("89.50")),
            ("  59.99Gabaryt  ", Decimal("59.99")),
        ],
    )
    def test_gabaryt_tag_variants(self, classifier, tag, expected_price):
        attrs = classifier.classify([tag])
        assert attrs.is_gabaryt is True
        assert attrs.gabaryt_unit_price == expected_price

    def test_first_priced_tag_in_list_order_wins(self, classifier):
        attrs = classifier.classify(["Gabaryt", "99.00 Gabaryt", "149.00 Gabaryt"])
        assert attrs.gabaryt_unit_price == Decimal("99.00")

    @pytest.mark.parametrize("tag", ["1.2.3 Gabaryt", "0 Gabaryt", "0.00 gabaryt", ",, Gabaryt"])
    def test_malformed_price_keeps_gabaryt_without_price(self, classifier, tag):
        attrs = classifier.classify([tag])
        assert attrs.is_gabaryt is True
        assert attrs.gabaryt_unit_price is None

    def test_oversized_price_keeps_gabaryt_without_price(self, classifier):
        attrs = classifier.classify(["123456789012345678901234567 Gabaryt"])
        assert attrs.is_gabaryt is True
        assert attrs.gabaryt_unit_price is None

    def test_oversized_price_is_charged_at_fallback(self, engine, catalog):
        catalog.add("v1", ["123456789012345678901234567 Gabaryt"])
        result = engine.calculate(cart(("v1", 1)), catalog.profiles)
        assert result.packages[0].gabaryt_price is None
        assert result.shipping_cost == Decimal("49.99")

    def test_malformed_price_falls_through_to_next_priced_tag(self, classifier):
        attrs = classifier.classify(["1.2.3 Gabaryt", "120.00 Gabaryt"])
        assert attrs.gabaryt_unit_price == Decimal("120.00")

    def test_courier_only_marks_product_oversized(self, classifier):
        attrs = classifier.classify(["Tylko kurier"])
        assert attrs.is_gabaryt is True
        assert attrs.gabaryt_unit_price is None
        assert attrs.restriction == ShippingRestriction.COURIER_ONLY

    def test_gabaryt_word_inside_longer_tag_does_not_match(self, classifier):
        assert classifier.classify(["Gabaryt XXL paleta"]).is_gabaryt is False


class TestWholesaler:

    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("hurtownia:Ikonka", "Ikonka"),
            ("hurtownia-Acme", "Acme"),
            ("Hurtownia_Acme Sp. z o.o.", "Acme Sp. z o.o."),
            ("hurtownia: Leker", "Leker"),
            ("Ikonka", "Ikonka"),
            ("btp", "BTP"),
            ("hurtownia przemysłowa", "Hurtownia Przemysłowa"),
        ],
    )
    def test_wholesaler_tags(self, classifier, tag, expected):
        assert classifier.classify([tag]).wholesaler_id == expected

    def test_unknown_bare_name_is_not_a_wholesaler(self, classifier):
        assert classifier.classify(["Acme"]).wholesaler_id is None

    def test_empty_prefixed_name_is_ignored(self, classifier):
        assert classifier.classify(["hurtownia:"]).wholesaler_id is None

    def test_first_wholesaler_tag_wins(self, classifier):
        assert classifier.classify(["Leker", "hurtownia:Ikonka"]).wholesaler_id == "Leker"
        assert classifier.classify(["hurtownia:Ikonka", "Leker"]).wholesaler_id == "Ikonka"

    def test_configured_wholesaler_list(self):
        classifier = TagClassifier(known_wholesalers=["Acme"])
        assert classifier.classify(["ACME"]).wholesaler_id == "Acme"
        assert classifier.classify(["Ikonka"]).wholesaler_id is None


class TestPaczkomatLimit:

    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("3 produkty w paczce", 3),
            ("5 produktów w paczce", 5),
            ("1 produkt w paczce", 1),
            ("12 Produktow W Paczce", 12),
            ("produkt w paczce: 4", 4),
            ("Produkt w paczce 6", 6),
        ],
    )
    def test_limit_tags(self, classifier, tag, expected):
        assert classifier.classify([tag]).paczkomat_unit_limit == expected

    @pytest.mark.parametrize("tag", ["0 produktów w paczce", "2.5 produkty w paczce", "produkt w paczce: ,"])
    def test_malformed_limit_falls_back_to_default(self, classifier, tag):
        assert classifier.classify([tag]).paczkomat_unit_limit == 10

    def test_first_valid_limit_wins(self, classifier):
        attrs = classifier.classify(["0 produktów w paczce", "4 produkty w paczce", "2 produkty w paczce"])
        assert attrs.paczkomat_unit_limit == 4


class TestRestriction:

    @pytest.mark.parametrize(
        "tag",
        ["Paczkomaty i Kurier", "paczkomaty i kurier", "PACZKOMATY I KURIER", "Paczkomat i kurier", "PaczkomatyiKurier"],
    )
    def test_inpost_only_variants(self, classifier, tag):
        attrs = classifier.classify([tag])
        assert attrs.restriction == ShippingRestriction.INPOST_ONLY
        assert attrs.is_gabaryt is False

    def test_courier_only_beats_inpost_only_regardless_of_order(self, classifier):
        assert classifier.classify(["Paczkomaty i Kurier", "Tylko kurier"]).restriction == ShippingRestriction.COURIER_ONLY
        assert classifier.classify(["Tylko kurier", "Paczkomaty i Kurier"]).restriction == ShippingRestriction.COURIER_ONLY

    def test_inpost_only_and_gabaryt_can_coexist(self, classifier):
        attrs = classifier.classify(["Gabaryt", "Paczkomaty i Kurier"])
        assert attrs.is_gabaryt is True
        assert attrs.restriction == ShippingRestriction.INPOST_ONLY


class TestWeight:

    @pytest.mark.parametrize(
        "tag, expected",
        [("do 31,5 kg", Decimal("31.5")), ("do 10kg", Decimal("10")), ("DO 2.5 KG", Decimal("2.5"))],
    )
    def test_weight_tag(self, classifier, tag, expected):
        assert classifier.classify([tag]).weight_limit_kg == expected

    def test_oversized_weight_is_ignored(self, classifier):
        assert classifier.classify(["do 123456789012345678901234567 kg"]).weight_limit_kg is None

    def test_weight_does_not_affect_other_categories(self, classifier):
        attrs = classifier.classify(["do 30 kg"])
        assert attrs.is_gabaryt is False
        assert attrs.paczkomat_unit_limit == 10


class TestResolve:

    def test_no_match_is_falsy_singleton(self):
        assert not NO_MATCH
        assert resolve([], GABARYT_RULES) is NO_MATCH

    def test_match_carries_value(self):
        assert resolve(["foo", "Gabaryt"], GABARYT_RULES) == Matched(True)
