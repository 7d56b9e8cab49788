"""
Order construction.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime

from storefront.cart._types import CartLine
from storefront.payments import PaymentDetails
from storefront.pricing import OrderTotals
from storefront.promotions import Promotion
from storefront.shipping import ShippingOption
from storefront.orders._types import AuditLogEntry, Order, OrderStatus, ShippingAddress

ORDER_ID_PREFIX = "HOS"
SYSTEM_USER = "System"
CREATED_NOTE = "Order created and payment received."


def new_order_id(now: datetime) -> str:
    """HOS-<epoch millis>-<suffix>; the suffix keeps same-millisecond orders apart."""
    return f"{ORDER_ID_PREFIX}-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:6]}"


def build_order(
    order_id: str,
    lines: Sequence[CartLine],
    address: ShippingAddress,
    payment: PaymentDetails,
    currency: str,
    totals: OrderTotals,
    promotion: Promotion | None,
    shipping: ShippingOption | None,
    now: datetime,
    user_id: int | None = None,
) -> Order:
    """
    Order record for a captured payment.

    Starts in Processing with a single System audit entry.
    """
    return Order(
        id=order_id,
        created_at=now,
        status=OrderStatus.PROCESSING,
        currency=currency,
        lines=tuple(lines),
        shipping_address=address,
        payment=payment,
        totals=totals,
        shipping=shipping,
        promotion_id=promotion.id if promotion is not None else None,
        promotion_code=promotion.code if promotion is not None else None,
        user_id=user_id,
        audit_log=(
            AuditLogEntry(
                timestamp=now,
                user=SYSTEM_USER,
                from_status=OrderStatus.PROCESSING,
                to_status=OrderStatus.PROCESSING,
                note=CREATED_NOTE,
            ),
        ),
    )


__all__ = ("ORDER_ID_PREFIX", "SYSTEM_USER", "CREATED_NOTE", "new_order_id", "build_order")
