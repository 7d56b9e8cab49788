"""
Order domain models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from storefront.cart._types import CartLine
from storefront.payments import PaymentDetails
from storefront.pricing import OrderTotals
from storefront.shipping import ShippingOption


class OrderStatus(Enum):
    PROCESSING = "Processing"
    AWAITING_SHIPMENT = "Awaiting Shipment"
    PARTIALLY_SHIPPED = "Partially Shipped"
    SHIPPED = "Shipped"
    AWAITING_PICKUP = "Awaiting Pickup"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURN_REQUESTED = "Return Requested"
    RETURN_APPROVED = "Return Approved"
    RETURN_REJECTED = "Return Rejected"
    RETURN_PROCESSING = "Return Processing"
    RETURN_COMPLETED = "Return Completed"
    DELIVERY_EXCEPTION = "Delivery Exception"


@dataclass(frozen=True, slots=True)
class AuditLogEntry:
    timestamp: datetime
    user: str
    from_status: OrderStatus
    to_status: OrderStatus
    note: str = ""


@dataclass(frozen=True, slots=True)
class ShippingAddress:
    name: str
    line1: str
    city: str
    postcode: str
    country: str
    line2: str = ""


@dataclass(frozen=True, slots=True)
class Order:
    """
    A placed order.

    `totals` is the exact OrderTotals the buyer was charged against.
    """

    id: str
    created_at: datetime
    status: OrderStatus
    currency: str
    lines: tuple[CartLine, ...]
    shipping_address: ShippingAddress
    payment: PaymentDetails
    totals: OrderTotals
    shipping: ShippingOption | None = None
    promotion_id: int | None = None
    promotion_code: str | None = None
    user_id: int | None = None
    audit_log: tuple[AuditLogEntry, ...] = ()


__all__ = ("OrderStatus", "AuditLogEntry", "ShippingAddress", "Order")
