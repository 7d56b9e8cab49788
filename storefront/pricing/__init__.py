"""
Pricing — order totals and seller settlement.

    from storefront import pricing as PR

    totals = PR.compute_order_totals(
        lines, "GBP", "GB",
        applied_promotion=None,
        shipping_cost=Decimal("5.99"),
        tax_rates=PR.DEFAULT_TAX_RATES,
    )
    PR.split_by_seller(lines, "GBP")
"""

from __future__ import annotations

from storefront.pricing._types import (
    TaxRateTable,
    DEFAULT_PLATFORM_FEE_RATE,
    DEFAULT_TAX_RATES,
    PlatformFee,
    OrderTotals,
    SellerSettlement,
    PricingPolicy,
    DEFAULT_POLICY,
)
from storefront.pricing._engine import (
    tax_rate_for,
    targeted_subtotal,
    discount_for,
    compute_order_totals,
    split_by_seller,
)

__all__ = (
    # Types
    "TaxRateTable",
    "DEFAULT_PLATFORM_FEE_RATE",
    "DEFAULT_TAX_RATES",
    "PlatformFee",
    "OrderTotals",
    "SellerSettlement",
    "PricingPolicy",
    "DEFAULT_POLICY",
    # Engine
    "tax_rate_for",
    "targeted_subtotal",
    "discount_for",
    "compute_order_totals",
    "split_by_seller",
)
