from decimal import Decimal

import pytest

from storefront import shipping as SH


@pytest.mark.parametrize(
    ("country", "zone"),
    [("GB", SH.ShippingZone.UK), ("gb", SH.ShippingZone.UK), ("US", SH.ShippingZone.NA), ("CA", SH.ShippingZone.NA), ("FR", SH.ShippingZone.ROW)],
)
def test_zone_for_country(country, zone):
    assert SH.zone_for_country(country) is zone


def test_uk_options_cheapest_first():
    options = SH.shipping_options("GB")
    assert [(o.carrier_id, o.method) for o in options] == [
        ("knight-bus", "Standard"),
        ("owl-post", "Standard"),
        ("owl-post", "Express"),
    ]
    assert options[0].cost == Decimal("4.50")
    assert options[0].estimated_delivery == "3-5 business days"
    assert options[2].estimated_delivery == "1 business day"


def test_rest_of_world_options():
    options = SH.shipping_options("JP")
    assert len(options) == 1
    assert options[0].cost == Decimal("15.99")


def test_zone_without_carriers_has_no_options():
    assert SH.shipping_options("US") == []


def test_find_option_respects_destination():
    assert SH.find_option("GB", "owl-post", "Express").cost == Decimal("9.99")
    assert SH.find_option("FR", "owl-post", "Express") is None
    assert SH.find_option("GB", "nobody", "Standard") is None


def test_custom_carriers():
    carrier = SH.Carrier("dragon", "Dragon Air", (SH.ShippingRate("Overnight", SH.ShippingZone.NA, Decimal("30"), 1, 2),))
    options = SH.shipping_options("US", [carrier])
    assert options == [SH.ShippingOption("dragon", "Dragon Air", "Overnight", Decimal("30"), "1-2 business days")]
