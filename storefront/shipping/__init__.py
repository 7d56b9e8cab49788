"""
Shipping — destination zones and carrier options.

    from storefront import shipping as SH

    SH.zone_for_country("CA")    # ShippingZone.NA
    SH.shipping_options("GB")    # cheapest first
"""

from __future__ import annotations

from storefront.shipping._types import (
    ShippingZone,
    ShippingRate,
    Carrier,
    ShippingOption,
)
from storefront.shipping._options import (
    zone_for_country,
    DEFAULT_CARRIERS,
    shipping_options,
    find_option,
)

__all__ = (
    "ShippingZone",
    "ShippingRate",
    "Carrier",
    "ShippingOption",
    "zone_for_country",
    "DEFAULT_CARRIERS",
    "shipping_options",
    "find_option",
)
