"""
Rate table + conversion to the base currency.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType

from kungfu import Option, Some, Nothing

from storefront._logging import get_logger
from storefront._types import Money, to_money

log = get_logger(__name__)

IDENTITY_RATE = Decimal(1)


# ═══════════════════════════════════════════════════════════════════════════════
# RateTable — static rates to a single base currency
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RateTable:
    """
    Conversion rates into `base`.

    `rates[code]` is how many units of base one unit of `code` buys.
    """

    base: str
    rates: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalised = {code.upper(): to_money(rate) for code, rate in self.rates.items()}
        normalised.setdefault(self.base.upper(), IDENTITY_RATE)
        object.__setattr__(self, "base", self.base.upper())
        object.__setattr__(self, "rates", MappingProxyType(normalised))

    def lookup(self, currency: str) -> Option[Decimal]:
        """Known rate, or Nothing() when the currency is not in the table."""
        rate = self.rates.get(currency.upper())
        return Some(rate) if rate is not None else Nothing()

    def rate(self, currency: str) -> Decimal:
        """
        Rate with the identity fallback.

        Unknown currencies convert 1:1. This is a conversion gap, not an
        error: it is logged and checkout carries on.
        """
        match self.lookup(currency):
            case Some(rate):
                return rate
            case _:
                log.warning(
                    "conversion gap: no rate for %s, using identity",
                    currency,
                    extra={"currency": currency, "base_currency": self.base},
                )
                return IDENTITY_RATE

    def knows(self, currency: str) -> bool:
        return currency.upper() in self.rates


DEFAULT_RATES = RateTable(
    base="GBP",
    rates={
        "GBP": Decimal("1"),
        "USD": Decimal("0.80"),
        "EUR": Decimal("0.85"),
        "JPY": Decimal("0.005"),
    },
)


# ═══════════════════════════════════════════════════════════════════════════════
# convert_to_base()
# ═══════════════════════════════════════════════════════════════════════════════


def convert_to_base(
    amount: object,
    source_currency: str,
    table: RateTable = DEFAULT_RATES,
) -> Money:
    """
    Convert `amount` in `source_currency` to the table's base currency.

    Negative amounts (fee reversals) convert the same way.

    Example:
        convert_to_base(Decimal("15"), "USD")  # Decimal("12.00")
        convert_to_base(Decimal("15"), "XYZ")  # Decimal("15"), logged
    """
    return to_money(amount) * table.rate(source_currency)


__all__ = ("IDENTITY_RATE", "RateTable", "DEFAULT_RATES", "convert_to_base")
