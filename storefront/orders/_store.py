"""
Order repository protocol + in-memory implementation.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from pydantic import TypeAdapter

from storefront.orders._types import Order

_ORDER_ADAPTER: TypeAdapter[Order] = TypeAdapter(Order)


def dump_order(order: Order) -> str:
    return _ORDER_ADAPTER.dump_json(order).decode()


def load_order(payload: str | bytes) -> Order:
    return _ORDER_ADAPTER.validate_json(payload)


class DuplicateOrder(ValueError):
    """An order with this id is already stored."""


class OrderRepository(Protocol):
    async def add(self, order: Order) -> Order:
        """Raises DuplicateOrder."""
        ...

    async def get(self, order_id: str) -> Order | None:
        ...

    async def delete(self, order_id: str) -> bool:
        ...


class MemoryOrderRepository:
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = asyncio.Lock()

    async def add(self, order: Order) -> Order:
        async with self._lock:
            if order.id in self._orders:
                raise DuplicateOrder(order.id)
            self._orders[order.id] = order
            return order

    async def get(self, order_id: str) -> Order | None:
        async with self._lock:
            return self._orders.get(order_id)

    async def delete(self, order_id: str) -> bool:
        async with self._lock:
            return self._orders.pop(order_id, None) is not None

    def __len__(self) -> int:
        return len(self._orders)


__all__ = (
    "dump_order",
    "load_order",
    "DuplicateOrder",
    "OrderRepository",
    "MemoryOrderRepository",
)
