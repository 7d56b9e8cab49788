"""
Seller ledger — append-only transactions and running balances.

A sale posts, per seller, a SALE credit for their gross share and a FEE
debit for the platform's cut. Reversing an order appends REFUND entries
that cancel both; nothing is ever deleted.

Staff post the rest by hand: a PAYOUT debits money sent to the seller, an
ADJUSTMENT carries any signed correction. A manual reversal is itself an
ADJUSTMENT of the opposite sign that references the entry it cancels.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from storefront._logging import get_logger
from storefront._types import Money, ZERO
from storefront.pricing import SellerSettlement

log = get_logger(__name__)


class LedgerError(ValueError):
    """Rejected manual transaction."""


class TransactionType(Enum):
    SALE = "Sale"
    PAYOUT = "Payout"
    ADJUSTMENT = "Adjustment"
    FEE = "Fee"
    REFUND = "Refund"


_REVERSIBLE = frozenset({TransactionType.FEE, TransactionType.REFUND, TransactionType.ADJUSTMENT})
_REVERSAL_PREFIX = "Reversal of transaction"


@dataclass(frozen=True, slots=True)
class Transaction:
    id: str
    date: datetime
    type: TransactionType
    amount: Money
    currency: str
    description: str
    reference_id: str | None = None
    seller_id: int | None = None
    processed_by: str = "System"


class SellerLedger:
    """
    In-memory ledger.

    Example:
        entries = await ledger.post_sale(order.id, "GBP", split_by_seller(order.lines, "GBP"))
        await ledger.balance(seller_id)   # {"GBP": Decimal("85.00")}
        await ledger.reverse(order.id)
        await ledger.post_payout(seller_id, Decimal("50"), "GBP", processed_by="admin")
    """

    def __init__(self) -> None:
        self._entries: list[Transaction] = []
        self._lock = asyncio.Lock()

    @property
    def entries(self) -> tuple[Transaction, ...]:
        return tuple(self._entries)

    async def balance(self, seller_id: int | None) -> dict[str, Money]:
        """Net balance per currency."""
        async with self._lock:
            totals: dict[str, Money] = {}
            for entry in self._entries:
                if entry.seller_id == seller_id:
                    totals[entry.currency] = totals.get(entry.currency, ZERO) + entry.amount
            return totals

    async def for_reference(self, reference_id: str) -> list[Transaction]:
        async with self._lock:
            return [e for e in self._entries if e.reference_id == reference_id]

    async def post_sale(
        self,
        order_id: str,
        currency: str,
        settlements: Iterable[SellerSettlement],
        now: datetime | None = None,
    ) -> list[Transaction]:
        when = now or datetime.now()
        posted: list[Transaction] = []
        for share in settlements:
            posted.append(_entry(
                when, TransactionType.SALE, share.subtotal, currency,
                f"Sale for order {order_id}", order_id, share.seller_id,
            ))
            posted.append(_entry(
                when, TransactionType.FEE, -share.platform_fee, currency,
                f"Platform fee for order {order_id}", order_id, share.seller_id,
            ))
        async with self._lock:
            self._entries.extend(posted)
        log.info("ledger posted", extra={"order_id": order_id, "entries": len(posted)})
        return posted

    async def reverse(self, order_id: str, now: datetime | None = None) -> list[Transaction]:
        """Cancel every SALE/FEE entry of an order. Reversing twice is a no-op."""
        when = now or datetime.now()
        async with self._lock:
            related = [e for e in self._entries if e.reference_id == order_id]
            if any(e.type is TransactionType.REFUND for e in related):
                return []
            reversals = [
                _entry(
                    when, TransactionType.REFUND, -e.amount, e.currency,
                    f"Reversal of {e.type.value.lower()} for order {order_id}",
                    order_id, e.seller_id,
                )
                for e in related
                if e.type in (TransactionType.SALE, TransactionType.FEE)
            ]
            self._entries.extend(reversals)
        log.info("ledger reversed", extra={"order_id": order_id, "entries": len(reversals)})
        return reversals

    # ═══════════════════════════════════════════════════════════════════════════
    # Manual entries
    # ═══════════════════════════════════════════════════════════════════════════

    async def post_payout(
        self,
        seller_id: int,
        amount: Money,
        currency: str,
        processed_by: str = "System",
        now: datetime | None = None,
    ) -> Transaction:
        """Record `amount` (positive) paid out to the seller."""
        if amount <= ZERO:
            raise LedgerError(f"payout amount must be positive, got {amount}")
        entry = _entry(
            now or datetime.now(), TransactionType.PAYOUT, -amount, currency.upper(),
            f"Payout to seller {seller_id}", None, seller_id, processed_by,
        )
        async with self._lock:
            self._entries.append(entry)
        log.info("payout posted", extra={"seller_id": seller_id, "amount": str(amount), "currency": entry.currency})
        return entry

    async def post_adjustment(
        self,
        seller_id: int,
        amount: Money,
        currency: str,
        description: str,
        processed_by: str = "System",
        reference_id: str | None = None,
        now: datetime | None = None,
    ) -> Transaction:
        """Signed correction: positive credits the seller, negative debits."""
        if amount == ZERO:
            raise LedgerError("adjustment amount must not be zero")
        entry = _entry(
            now or datetime.now(), TransactionType.ADJUSTMENT, amount, currency.upper(),
            description, reference_id, seller_id, processed_by,
        )
        async with self._lock:
            self._entries.append(entry)
        log.info("adjustment posted", extra={"seller_id": seller_id, "amount": str(amount), "currency": entry.currency})
        return entry

    async def reverse_transaction(
        self,
        transaction_id: str,
        reason: str,
        processed_by: str = "System",
        now: datetime | None = None,
    ) -> Transaction:
        """
        Cancel one FEE, REFUND or ADJUSTMENT entry with an opposite ADJUSTMENT.

        Raises:
            LedgerError: unknown id, a type that cannot be reversed by hand,
                a reversal entry, or an entry that was already reversed.
        """
        async with self._lock:
            target = next((e for e in self._entries if e.id == transaction_id), None)
            if target is None:
                raise LedgerError(f"no transaction {transaction_id}")
            if target.type not in _REVERSIBLE or target.description.startswith(_REVERSAL_PREFIX):
                raise LedgerError(f"transaction {transaction_id} cannot be reversed")
            if any(e.reference_id == transaction_id and e.type is TransactionType.ADJUSTMENT for e in self._entries):
                raise LedgerError(f"transaction {transaction_id} is already reversed")

            entry = _entry(
                now or datetime.now(), TransactionType.ADJUSTMENT, -target.amount, target.currency,
                f"{_REVERSAL_PREFIX} {transaction_id}. Reason: {reason}",
                transaction_id, target.seller_id, processed_by,
            )
            self._entries.append(entry)
        log.info("transaction reversed", extra={"transaction_id": transaction_id, "reversal_id": entry.id})
        return entry

    async def payouts(self, seller_id: int) -> list[Transaction]:
        """Payout history, oldest first."""
        async with self._lock:
            return [e for e in self._entries if e.seller_id == seller_id and e.type is TransactionType.PAYOUT]


def _entry(
    when: datetime,
    kind: TransactionType,
    amount: Money,
    currency: str,
    description: str,
    reference_id: str | None,
    seller_id: int | None,
    processed_by: str = "System",
) -> Transaction:
    return Transaction(
        id=f"txn_{uuid.uuid4().hex[:12]}",
        date=when,
        type=kind,
        amount=amount,
        currency=currency,
        description=description,
        reference_id=reference_id,
        seller_id=seller_id,
        processed_by=processed_by,
    )


__all__ = ("LedgerError", "TransactionType", "Transaction", "SellerLedger")
