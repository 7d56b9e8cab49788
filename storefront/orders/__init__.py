"""
Orders — placed-order records and their persistence.

    from storefront import orders as O

    order = O.build_order(O.new_order_id(now), lines, address, payment,
                          "GBP", totals, promo, shipping, now)
    await repo.add(order)
"""

from __future__ import annotations

from storefront.orders._types import (
    OrderStatus,
    AuditLogEntry,
    ShippingAddress,
    Order,
)
from storefront.orders._build import (
    ORDER_ID_PREFIX,
    SYSTEM_USER,
    CREATED_NOTE,
    new_order_id,
    build_order,
)
from storefront.orders._store import (
    dump_order,
    load_order,
    DuplicateOrder,
    OrderRepository,
    MemoryOrderRepository,
)
from storefront.orders._sqlalchemy import OrderTable, SQLAlchemyOrderRepository

__all__ = (
    # Types
    "OrderStatus",
    "AuditLogEntry",
    "ShippingAddress",
    "Order",
    # Build
    "ORDER_ID_PREFIX",
    "SYSTEM_USER",
    "CREATED_NOTE",
    "new_order_id",
    "build_order",
    # Store
    "dump_order",
    "load_order",
    "DuplicateOrder",
    "OrderRepository",
    "MemoryOrderRepository",
    "OrderTable",
    "SQLAlchemyOrderRepository",
)
