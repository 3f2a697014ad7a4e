"""
Tests for whole-cart and per-package carrier menus.
"""
from decimal import Decimal

import pytest

from wbtrade_shipping.core.exceptions import (
    ShippingMethodUnavailableError,
    UnknownCarrierError,
    UnknownPackageError,
)
from wbtrade_shipping.modules.shipping.carriers import get_carrier, get_registered_carriers
from wbtrade_shipping.modules.shipping.carriers.base import GABARYT_ONLY_REASON, INPOST_ONLY_REASON
from wbtrade_shipping.modules.shipping.costs import PACZKOMAT_EXCLUDED_REASON
from wbtrade_shipping.modules.shipping.domain import CarrierCode
from wbtrade_shipping.modules.shipping.engine import ShippingEngine
from wbtrade_shipping.modules.shipping.rates import RateTable
from tests.conftest import cart


def by_id(options):
    return {o.carrier_id: o for o in options}


class TestCarrierRegistry:

    def test_every_carrier_code_is_registered(self):
        assert set(get_registered_carriers()) == set(CarrierCode)

    def test_only_oversized_carrier_is_forced(self):
        forced = [code for code in CarrierCode if get_carrier(code).is_forced]
        assert forced == [CarrierCode.WYSYLKA_GABARYT]

    def test_inpost_carriers(self):
        inpost = {code for code in CarrierCode if get_carrier(code).is_inpost}
        assert inpost == {CarrierCode.INPOST_PACZKOMAT, CarrierCode.INPOST_KURIER}

    def test_lookup_by_string(self):
        assert get_carrier("dpd") is get_carrier(CarrierCode.DPD)


class TestWholeCartMenu:

    def test_standard_cart_offers_every_enabled_carrier(self, engine, catalog, rates):
        catalog.add("a1", ["hurtownia:A"]).add("b1", ["hurtownia:B"])
        quote = engine.quote_cart(cart(("a1", 1), ("b1", 1)), catalog.profiles)

        assert [o.carrier_id for o in quote.shipping_methods] == [c.value for c in rates.enabled_carriers]
        assert all(o.available for o in quote.shipping_methods)
        assert by_id(quote.shipping_methods)["dpd"].price == Decimal("39.98")
        assert by_id(quote.shipping_methods)["inpost_paczkomat"].price == Decimal("29.98")

    def test_inpost_only_item_restricts_whole_cart(self, engine, catalog):
        """Scenario D."""
        catalog.add("locker", ["Paczkomaty i Kurier"]).add("plain")
        quote = engine.quote_cart(cart(("locker", 1), ("plain", 1)), catalog.profiles)

        available = {o.carrier_id for o in quote.shipping_methods if o.available}
        assert available == {"inpost_paczkomat", "inpost_kurier"}
        dpd = by_id(quote.shipping_methods)["dpd"]
        assert dpd.reason_if_unavailable == INPOST_ONLY_REASON
        assert dpd.price == Decimal("0.00")

    def test_inpost_only_restriction_intersects_across_packages(self, engine, catalog):
        catalog.add("locker", ["Paczkomaty i Kurier", "hurtownia:A"]).add("b1", ["hurtownia:B"])
        quote = engine.quote_cart(cart(("locker", 1), ("b1", 1)), catalog.profiles)

        available = {o.carrier_id for o in quote.shipping_methods if o.available}
        assert available == {"inpost_paczkomat", "inpost_kurier"}

    def test_gabaryt_prepends_forced_option(self, engine, catalog):
        catalog.add("sofa", ["149.00 Gabaryt"]).add("a1")
        quote = engine.quote_cart(cart(("sofa", 2), ("a1", 1)), catalog.profiles)
        menu = quote.shipping_methods

        forced = menu[0]
        assert forced.carrier_id == "wysylka_gabaryt"
        assert forced.forced is True
        assert forced.available is True
        assert forced.price == Decimal("298.00")

        options = by_id(menu[1:])
        assert options["inpost_paczkomat"].available is False
        assert options["inpost_paczkomat"].reason_if_unavailable == PACZKOMAT_EXCLUDED_REASON
        # regular carriers price only the standard package
        assert options["dpd"].available is True
        assert options["dpd"].price == Decimal("19.99")
        assert options["dhl"].price == Decimal("24.99")

    def test_all_gabaryt_cart_offers_only_forced_carrier(self, engine, catalog):
        catalog.add("sofa", ["Gabaryt"])
        menu = engine.quote_cart(cart(("sofa", 1)), catalog.profiles).shipping_methods

        assert [o.carrier_id for o in menu if o.available] == ["wysylka_gabaryt"]
        assert menu[0].price == Decimal("49.99")
        for option in menu[1:]:
            assert option.reason_if_unavailable == GABARYT_ONLY_REASON

    def test_free_shipping_menu_is_free(self, engine, catalog):
        catalog.add("demo", ["testowy"]).add("sofa", ["Gabaryt"])
        menu = engine.quote_cart(cart(("demo", 1), ("sofa", 1)), catalog.profiles).shipping_methods

        assert all(o.available for o in menu)
        assert all(o.price == Decimal("0.00") for o in menu)
        assert "wysylka_gabaryt" not in by_id(menu)

    def test_menu_carries_display_data(self, engine, catalog):
        catalog.add("a1")
        menu = by_id(engine.quote_cart(cart(("a1", 1)), catalog.profiles).shipping_methods)
        assert menu["inpost_paczkomat"].name == "InPost Paczkomat"
        assert menu["inpost_paczkomat"].estimated_delivery == "1-2 dni robocze"


class TestPerPackageMenus:

    @pytest.fixture
    def mixed_cart(self, catalog):
        catalog.add("sofa", ["149.00 Gabaryt"])
        catalog.add("mug", ["3 produkty w paczce", "hurtownia:A"])
        catalog.add("locker", ["Paczkomaty i Kurier", "hurtownia:B"])
        return cart(("sofa", 1), ("mug", 5), ("locker", 1)), catalog.profiles

    def test_gabaryt_package_menu(self, engine, mixed_cart):
        result = engine.package_options(*mixed_cart)
        gabaryt = result.packages_with_options[0]

        assert gabaryt.package.id == "gabaryt-1"
        assert gabaryt.selected_carrier_id == "wysylka_gabaryt"
        assert gabaryt.selected_option.price == Decimal("149.00")
        others = [o for o in gabaryt.carrier_options if o.carrier_id != "wysylka_gabaryt"]
        assert others and all(not o.available for o in others)
        assert all(o.reason_if_unavailable == GABARYT_ONLY_REASON for o in others)

    def test_standard_package_keeps_paczkomat_despite_gabaryt_elsewhere(self, engine, mixed_cart):
        result = engine.package_options(*mixed_cart)
        mug = result.packages_with_options[1]

        assert mug.selected_carrier_id == "inpost_paczkomat"
        assert mug.selected_option.price == Decimal("29.98")
        assert "wysylka_gabaryt" not in by_id(mug.carrier_options)
        assert all(o.available for o in mug.carrier_options)

    def test_inpost_only_package_menu(self, engine, mixed_cart):
        result = engine.package_options(*mixed_cart)
        locker = result.packages_with_options[2]

        available = {o.carrier_id for o in locker.carrier_options if o.available}
        assert available == {"inpost_paczkomat", "inpost_kurier"}
        assert locker.selected_carrier_id == "inpost_paczkomat"

    def test_total_is_sum_of_default_selections(self, engine, mixed_cart):
        result = engine.package_options(*mixed_cart)
        assert result.total_shipping_cost == Decimal("149.00") + Decimal("29.98") + Decimal("14.99")
        assert result.warnings == engine.calculate(*mixed_cart).warnings

    def test_courier_fallback_when_paczkomat_disabled(self, catalog):
        engine = ShippingEngine(rates=RateTable(enabled_carriers=(CarrierCode.INPOST_KURIER, CarrierCode.DPD)))
        catalog.add("a1")
        result = engine.package_options(cart(("a1", 1)), catalog.profiles)
        assert result.packages_with_options[0].selected_carrier_id == "inpost_kurier"

    def test_empty_cart(self, engine):
        result = engine.package_options([], {})
        assert result.packages_with_options == []
        assert result.total_shipping_cost == Decimal("0.00")


class TestPackageSelections:

    @pytest.fixture
    def mixed_cart(self, catalog):
        catalog.add("sofa", ["149.00 Gabaryt"])
        catalog.add("a1", ["hurtownia:A"])
        catalog.add("locker", ["Paczkomaty i Kurier", "hurtownia:B"])
        return cart(("sofa", 1), ("a1", 1), ("locker", 1)), catalog.profiles

    def test_selection_changes_total(self, engine, mixed_cart):
        result = engine.quote_selections(*mixed_cart, {"standard-2": "dhl", "standard-3": "inpost_kurier"})

        selected = [p.selected_carrier_id for p in result.packages_with_options]
        assert selected == ["wysylka_gabaryt", "dhl", "inpost_kurier"]
        assert result.total_shipping_cost == Decimal("149.00") + Decimal("24.99") + Decimal("19.99")

    def test_missing_selection_keeps_default(self, engine, mixed_cart):
        result = engine.quote_selections(*mixed_cart, {"standard-2": "dpd"})
        assert result.packages_with_options[2].selected_carrier_id == "inpost_paczkomat"

    def test_unknown_package(self, engine, mixed_cart):
        with pytest.raises(UnknownPackageError):
            engine.quote_selections(*mixed_cart, {"standard-99": "dpd"})

    def test_unavailable_carrier_for_package(self, engine, mixed_cart):
        with pytest.raises(ShippingMethodUnavailableError) as exc_info:
            engine.quote_selections(*mixed_cart, {"standard-3": "dpd"})
        assert exc_info.value.details["reason"] == INPOST_ONLY_REASON

        with pytest.raises(ShippingMethodUnavailableError):
            engine.quote_selections(*mixed_cart, {"gabaryt-1": "inpost_kurier"})

    def test_carrier_not_on_menu(self, engine, mixed_cart):
        with pytest.raises(UnknownCarrierError):
            engine.quote_selections(*mixed_cart, {"standard-2": "ups"})
        with pytest.raises(UnknownCarrierError):
            engine.quote_selections(*mixed_cart, {"standard-2": "wysylka_gabaryt"})
