"""
Zone lookup and option listing.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from storefront.shipping._types import Carrier, ShippingOption, ShippingRate, ShippingZone

_ZONES: dict[str, ShippingZone] = {
    "GB": ShippingZone.UK,
    "US": ShippingZone.NA,
    "CA": ShippingZone.NA,
}


def zone_for_country(country: str) -> ShippingZone:
    """GB ships domestic, US/CA to North America, everything else worldwide."""
    return _ZONES.get(country.strip().upper(), ShippingZone.ROW)


DEFAULT_CARRIERS: tuple[Carrier, ...] = (
    Carrier(
        id="owl-post",
        name="Royal Owl Mail",
        rates=(
            ShippingRate("Standard", ShippingZone.UK, Decimal("5.99"), 2, 4),
            ShippingRate("Express", ShippingZone.UK, Decimal("9.99"), 1, 1),
            ShippingRate("Standard", ShippingZone.ROW, Decimal("15.99"), 7, 14),
        ),
    ),
    Carrier(
        id="knight-bus",
        name="Knight Bus Couriers",
        rates=(
            ShippingRate("Standard", ShippingZone.UK, Decimal("4.50"), 3, 5),
        ),
    ),
)


def shipping_options(
    country: str,
    carriers: Iterable[Carrier] = DEFAULT_CARRIERS,
) -> list[ShippingOption]:
    """
    Every carrier rate serving `country`'s zone, cheapest first.

    Example:
        shipping_options("GB")[0]
        # ShippingOption(carrier_id="knight-bus", method="Standard",
        #                cost=Decimal("4.50"), estimated_delivery="3-5 business days", ...)
    """
    zone = zone_for_country(country)
    options = [
        ShippingOption(
            carrier_id=carrier.id,
            carrier_name=carrier.name,
            method=rate.method,
            cost=rate.cost,
            estimated_delivery=rate.estimated_delivery,
        )
        for carrier in carriers
        for rate in carrier.rates
        if rate.zone is zone
    ]
    return sorted(options, key=lambda option: option.cost)


def find_option(
    country: str,
    carrier_id: str,
    method: str,
    carriers: Iterable[Carrier] = DEFAULT_CARRIERS,
) -> ShippingOption | None:
    """The option a buyer selected, if it serves `country`."""
    return next(
        (
            option
            for option in shipping_options(country, carriers)
            if option.carrier_id == carrier_id and option.method == method
        ),
        None,
    )


__all__ = ("zone_for_country", "DEFAULT_CARRIERS", "shipping_options", "find_option")
