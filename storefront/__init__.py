"""
storefront — order pricing, promotions and checkout for a multi-seller shop.

    from storefront import pricing as PR      # Totals, fees, seller split
    from storefront import promotions as P    # Codes and eligibility
    from storefront import saga as S          # Compensated steps
    from storefront import idempotency as I   # At-most-once execution
    from storefront import checkout           # All of the above, wired
"""

from storefront import currency
from storefront import cart
from storefront import promotions
from storefront import pricing
from storefront import shipping
from storefront import payments
from storefront import orders
from storefront import ledger
from storefront import saga
from storefront import idempotency
from storefront import checkout
from storefront._types import (
    Money,
    CurrencyCode,
    CountryCode,
    ZERO,
    to_money,
)

__version__ = "0.1.0"

__all__ = (
    "currency",
    "cart",
    "promotions",
    "pricing",
    "shipping",
    "payments",
    "orders",
    "ledger",
    "saga",
    "idempotency",
    "checkout",
    "Money",
    "CurrencyCode",
    "CountryCode",
    "ZERO",
    "to_money",
)
