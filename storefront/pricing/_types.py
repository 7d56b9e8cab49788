"""
Pricing types — computed totals and the policy that parameterises them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import TYPE_CHECKING

from storefront._types import Money, ZERO, to_money
from storefront.currency import RateTable, DEFAULT_RATES

if TYPE_CHECKING:
    from storefront.config import Settings

type TaxRateTable = Mapping[str, Decimal]
"""Tax rate fraction keyed by destination country code. Missing ⇒ 0."""

DEFAULT_PLATFORM_FEE_RATE = Decimal("0.15")

DEFAULT_TAX_RATES: TaxRateTable = MappingProxyType({
    "GB": Decimal("0.20"),
    "US": Decimal("0.08"),
    "CA": Decimal("0.13"),
})


# ═══════════════════════════════════════════════════════════════════════════════
# Totals
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PlatformFee:
    """Platform fee in the order currency and in the base currency."""

    local: Money = ZERO
    base: Money = ZERO


@dataclass(frozen=True, slots=True)
class OrderTotals:
    """
    Financial breakdown of one order.

    Never mutated: any input change means a fresh computation. Checkout copies
    these fields verbatim into the order record.
    """

    subtotal: Money = ZERO
    discount_amount: Money = ZERO
    shipping_cost: Money = ZERO
    taxes: Money = ZERO
    platform_fee: PlatformFee = field(default_factory=PlatformFee)
    total: Money = ZERO
    seller_payout: Money = ZERO


@dataclass(frozen=True, slots=True)
class SellerSettlement:
    """One seller's share of an order: gross sales, platform fee, payout."""

    seller_id: int | None
    subtotal: Money
    platform_fee: Money
    payout: Money


# ═══════════════════════════════════════════════════════════════════════════════
# Policy
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PricingPolicy:
    """
    Marketplace-wide pricing knobs.

    Example:
        policy = PricingPolicy.from_settings(get_settings())
        compute_order_totals(..., policy=policy)
    """

    platform_fee_rate: Decimal = DEFAULT_PLATFORM_FEE_RATE
    rates: RateTable = DEFAULT_RATES
    tax_rates: TaxRateTable = DEFAULT_TAX_RATES

    @classmethod
    def from_settings(cls, settings: Settings) -> PricingPolicy:
        return cls(
            platform_fee_rate=to_money(settings.platform_fee_rate),
            rates=RateTable(base=settings.base_currency, rates=settings.conversion_rates),
            tax_rates=MappingProxyType({
                country.upper(): to_money(rate) for country, rate in settings.tax_rates.items()
            }),
        )


DEFAULT_POLICY = PricingPolicy()


__all__ = (
    "TaxRateTable",
    "DEFAULT_PLATFORM_FEE_RATE",
    "DEFAULT_TAX_RATES",
    "PlatformFee",
    "OrderTotals",
    "SellerSettlement",
    "PricingPolicy",
    "DEFAULT_POLICY",
)
