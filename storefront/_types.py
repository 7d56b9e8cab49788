"""
Core types for storefront.

Re-exports from kungfu + money helpers shared by every module.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

# Re-export from kungfu
from kungfu import Result, Ok, Error, Option, Some, Nothing, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Monetary amount. The currency always travels next to it."""

type CurrencyCode = str
"""Three-letter currency code, e.g. GBP."""

type CountryCode = str
"""Two-letter ISO country code, e.g. GB."""

ZERO = Decimal(0)


def to_money(value: object) -> Decimal:
    """
    Normalise a number into Decimal.

    Floats go through str() so 5.99 stays 5.99.
    Missing or unparsable values become 0.
    """
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    return ZERO if amount.is_nan() else amount


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "LazyCoroResult",
    # Money
    "Money",
    "CurrencyCode",
    "CountryCode",
    "ZERO",
    "to_money",
)
