"""
Checkout — orchestration of pricing, payment, order, promotion usage
and seller ledger.

    from storefront.checkout import CheckoutService, CheckoutRequest

    result = await service.place_order(CheckoutRequest(
        idempotency_key="9f1c...",
        cart_key=cart_key(user.id),
        currency="GBP",
        address=address,
        shipping=shipping_options("GB")[0],
    ))
"""

from __future__ import annotations

from storefront.checkout._types import CheckoutRequest, CheckoutError, CheckoutErrors
from storefront.checkout._service import DEFAULT_IDEMPOTENCY_POLICY, CheckoutService

__all__ = (
    "CheckoutRequest",
    "CheckoutError",
    "CheckoutErrors",
    "DEFAULT_IDEMPOTENCY_POLICY",
    "CheckoutService",
)
