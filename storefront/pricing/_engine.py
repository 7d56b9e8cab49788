"""
Order pricing engine.

Pure and synchronous: same inputs, same OrderTotals. Never raises for bad
configuration data (unknown currency or country degrade to identity rate /
zero tax, with a warning).

Order of operations:

    shipping → subtotal → discount → discounted subtotal → tax
             → platform fee → total → seller payout
"""

from __future__ import annotations

from collections.abc import Sequence

from storefront._logging import get_logger
from storefront._types import Money, ZERO, to_money
from storefront.cart._pricing import cart_subtotal, consumer_price, line_total
from storefront.cart._types import CartLine
from storefront.currency import convert_to_base
from storefront.promotions._eligibility import line_is_targeted, meets_min_spend
from storefront.promotions._types import (
    FixedAmountOff,
    FreeShipping,
    PercentageOff,
    Promotion,
    TargetedPercentageOff,
)
from storefront.pricing._types import (
    DEFAULT_POLICY,
    OrderTotals,
    PlatformFee,
    PricingPolicy,
    SellerSettlement,
    TaxRateTable,
)

log = get_logger(__name__)

HUNDRED = to_money(100)


# ═══════════════════════════════════════════════════════════════════════════════
# Building blocks
# ═══════════════════════════════════════════════════════════════════════════════


def tax_rate_for(country: str, tax_rates: TaxRateTable) -> Money:
    """Rate for `country`; unknown countries are untaxed (and logged)."""
    rate = tax_rates.get(country.upper()) if country else None
    if rate is None:
        log.warning(
            "tax gap: no rate for %r, charging no tax",
            country,
            extra={"country": country},
        )
        return ZERO
    return to_money(rate)


def targeted_subtotal(
    lines: Sequence[CartLine],
    promotion: Promotion,
    currency: str,
) -> Money:
    """Retail value of the lines a targeted promotion applies to."""
    return sum(
        (
            consumer_price(line, currency) * line.quantity
            for line in lines
            if line_is_targeted(promotion, line)
        ),
        ZERO,
    )


def discount_for(
    promotion: Promotion,
    lines: Sequence[CartLine],
    currency: str,
    subtotal: Money,
    shipping: Money,
) -> Money:
    """
    Raw discount before clamping.

    `shipping` is the pre-waiver cost; FreeShipping discounts exactly that.
    """
    match promotion.discount:
        case PercentageOff(percent):
            return subtotal * to_money(percent) / HUNDRED
        case TargetedPercentageOff(percent):
            return targeted_subtotal(lines, promotion, currency) * to_money(percent) / HUNDRED
        case FixedAmountOff(amount):
            return to_money(amount)
        case FreeShipping():
            return shipping
    return ZERO


# ═══════════════════════════════════════════════════════════════════════════════
# compute_order_totals()
# ═══════════════════════════════════════════════════════════════════════════════


def compute_order_totals(
    lines: Sequence[CartLine],
    currency: str,
    destination_country: str,
    applied_promotion: Promotion | None,
    shipping_cost: object,
    tax_rates: TaxRateTable,
    wholesale: bool = False,
    *,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> OrderTotals:
    """
    Full financial breakdown of an order.

    A promotion that fails its minimum spend here contributes nothing; callers
    are expected to have rejected it already via check_eligibility().

    Example:
        totals = compute_order_totals(
            state.lines, "GBP", "GB",
            applied_promotion=promo,
            shipping_cost=Decimal("5.99"),
            tax_rates=policy.tax_rates,
        )
        totals.total         # charged to the buyer
        totals.seller_payout # subtotal minus the platform fee
    """
    shipping = to_money(shipping_cost)
    final_shipping = shipping
    subtotal = cart_subtotal(lines, currency, wholesale)

    discount = ZERO
    waived = False
    if applied_promotion is not None and meets_min_spend(applied_promotion, lines, currency, wholesale):
        discount = discount_for(applied_promotion, lines, currency, subtotal, shipping)
        if applied_promotion.waives_shipping:
            waived = True
            final_shipping = ZERO
        discount = min(subtotal + shipping, discount)

    discounted_subtotal = subtotal if waived else subtotal - discount
    taxes = discounted_subtotal * tax_rate_for(destination_country, tax_rates)

    fee_local = subtotal * policy.platform_fee_rate
    fee = PlatformFee(
        local=fee_local,
        base=convert_to_base(fee_local, currency, policy.rates),
    )

    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount,
        shipping_cost=final_shipping,
        taxes=taxes,
        platform_fee=fee,
        total=discounted_subtotal + final_shipping + taxes,
        seller_payout=subtotal - fee_local,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# split_by_seller()
# ═══════════════════════════════════════════════════════════════════════════════


def split_by_seller(
    lines: Sequence[CartLine],
    currency: str,
    wholesale: bool = False,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> tuple[SellerSettlement, ...]:
    """
    Per-seller share of subtotal, platform fee and payout.

    Sellers appear in first-seen order. The shares add up to the order's
    subtotal, platform_fee.local and seller_payout.
    """
    gross: dict[int | None, Money] = {}
    for line in lines:
        seller = line.product.seller_id
        gross[seller] = gross.get(seller, ZERO) + line_total(line, currency, wholesale)

    settlements = []
    for seller, seller_subtotal in gross.items():
        fee = seller_subtotal * policy.platform_fee_rate
        settlements.append(SellerSettlement(
            seller_id=seller,
            subtotal=seller_subtotal,
            platform_fee=fee,
            payout=seller_subtotal - fee,
        ))
    return tuple(settlements)


__all__ = (
    "tax_rate_for",
    "targeted_subtotal",
    "discount_for",
    "compute_order_totals",
    "split_by_seller",
)
