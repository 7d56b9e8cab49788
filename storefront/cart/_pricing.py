"""
Line pricing — the unit price rules shared by the engine and promotions.
"""

from __future__ import annotations

from collections.abc import Iterable

from storefront._types import Money, ZERO, to_money
from storefront.cart._types import CartLine


def consumer_price(line: CartLine, currency: str) -> Money:
    """Consumer (retail) unit price; 0 when the currency is not priced."""
    return to_money(line.product.pricing.get(currency))


def unit_price(line: CartLine, currency: str, wholesale: bool = False) -> Money:
    """
    Unit price for the buyer.

    Wholesale buyers pay the trade price when the product has one in
    `currency`; everyone else (and products without it) pays retail.
    """
    trade = line.product.trade_pricing
    if wholesale and trade and trade.get(currency) is not None:
        return to_money(trade[currency])
    return consumer_price(line, currency)


def line_total(line: CartLine, currency: str, wholesale: bool = False) -> Money:
    return unit_price(line, currency, wholesale) * line.quantity


def cart_subtotal(
    lines: Iterable[CartLine],
    currency: str,
    wholesale: bool = False,
) -> Money:
    """Σ quantity × unit price."""
    return sum((line_total(line, currency, wholesale) for line in lines), ZERO)


__all__ = ("consumer_price", "unit_price", "line_total", "cart_subtotal")
