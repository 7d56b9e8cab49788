"""
Currency — conversion into the settlement (base) currency.

    from storefront import currency as FX

    FX.convert_to_base(Decimal("15"), "USD")   # Decimal("12.00")
    FX.DEFAULT_RATES.lookup("XYZ")              # Nothing()
"""

from __future__ import annotations

from storefront.currency._rates import (
    IDENTITY_RATE,
    RateTable,
    DEFAULT_RATES,
    convert_to_base,
)

__all__ = (
    "IDENTITY_RATE",
    "RateTable",
    "DEFAULT_RATES",
    "convert_to_base",
)
