"""
SQLAlchemy order repository.

The full order is kept as a JSON payload; the money columns are copies of
its totals so reports can query them without decoding JSON.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, Text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db import Base
from storefront.orders._types import Order
from storefront.orders._store import DuplicateOrder, dump_order, load_order

_MONEY = Numeric(18, 6)


class OrderTable(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    subtotal: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    shipping_cost: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    taxes: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    total: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    platform_fee_base: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)
    seller_payout: Mapped[Decimal] = mapped_column(_MONEY, nullable=False)

    transaction_id: Mapped[str] = mapped_column(String(100), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    @classmethod
    def from_order(cls, order: Order) -> OrderTable:
        totals = order.totals
        return cls(
            id=order.id,
            user_id=order.user_id,
            status=order.status.value,
            currency=order.currency,
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            shipping_cost=totals.shipping_cost,
            taxes=totals.taxes,
            total=totals.total,
            platform_fee=totals.platform_fee.local,
            platform_fee_base=totals.platform_fee.base,
            seller_payout=totals.seller_payout,
            transaction_id=order.payment.transaction_id,
            payload=dump_order(order),
            created_at=order.created_at,
        )


class SQLAlchemyOrderRepository:
    """OrderRepository backed by the `orders` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add(self, order: Order) -> Order:
        async with self._session_factory() as session:
            session.add(OrderTable.from_order(order))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateOrder(order.id) from None
        return order

    async def get(self, order_id: str) -> Order | None:
        async with self._session_factory() as session:
            row = await session.get(OrderTable, order_id)
            return load_order(row.payload) if row is not None else None

    async def delete(self, order_id: str) -> bool:
        async with self._session_factory() as session:
            row = await session.get(OrderTable, order_id)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True


__all__ = ("OrderTable", "SQLAlchemyOrderRepository")
