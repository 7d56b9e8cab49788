"""
Ledger — seller sales, fees, refunds, payouts and adjustments.

    from storefront import ledger as LG

    ledger = LG.SellerLedger()
    await ledger.post_sale(order.id, "GBP", settlements)
    await ledger.post_payout(seller_id, Decimal("50"), "GBP", processed_by="admin")
"""

from __future__ import annotations

from storefront.ledger._ledger import LedgerError, TransactionType, Transaction, SellerLedger

__all__ = ("LedgerError", "TransactionType", "Transaction", "SellerLedger")
