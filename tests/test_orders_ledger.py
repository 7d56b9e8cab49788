from datetime import datetime
from decimal import Decimal

import pytest

from storefront import orders as O
from storefront.ledger import LedgerError, SellerLedger, TransactionType
from storefront.payments import PaymentDetails
from storefront.pricing import SellerSettlement, compute_order_totals, DEFAULT_TAX_RATES
from storefront.promotions import PercentageOff, Promotion
from storefront.shipping import find_option

from helpers import NOW


def test_order_id_format():
    order_id = O.new_order_id(datetime(2026, 1, 1))
    prefix, millis, suffix = order_id.split("-")
    assert prefix == "HOS"
    assert millis == str(int(datetime(2026, 1, 1).timestamp() * 1000))
    assert len(suffix) == 6


def test_build_order_copies_totals_and_promotion(hundred_pound_cart, address):
    promo = Promotion(1, "SAVE10", PercentageOff(Decimal("10")))
    totals = compute_order_totals(hundred_pound_cart.lines, "GBP", "GB", promo, Decimal("5.99"), DEFAULT_TAX_RATES)
    payment = PaymentDetails("Simulated Card", "txn_1", totals.total, "GBP")

    order = O.build_order(
        "HOS-1", hundred_pound_cart.lines, address, payment, "GBP", totals, promo,
        find_option("GB", "owl-post", "Standard"), NOW, user_id=3,
    )

    assert order.totals is totals
    assert order.promotion_code == "SAVE10"
    assert order.status is O.OrderStatus.PROCESSING
    entry = order.audit_log[0]
    assert (entry.from_status, entry.to_status, entry.note) == (
        O.OrderStatus.PROCESSING, O.OrderStatus.PROCESSING, O.CREATED_NOTE,
    )
    assert O.load_order(O.dump_order(order)) == order


async def test_memory_repository_refuses_duplicates(hundred_pound_cart, address):
    payment = PaymentDetails("Simulated Card", "txn_1", Decimal("1"), "GBP")
    order = O.build_order("HOS-1", hundred_pound_cart.lines, address, payment, "GBP", compute_order_totals(
        hundred_pound_cart.lines, "GBP", "GB", None, None, DEFAULT_TAX_RATES,
    ), None, None, NOW)
    repo = O.MemoryOrderRepository()

    await repo.add(order)
    with pytest.raises(O.DuplicateOrder):
        await repo.add(order)
    assert await repo.delete("HOS-1")
    assert await repo.get("HOS-1") is None


async def test_ledger_sale_and_reversal():
    ledger = SellerLedger()
    shares = (
        SellerSettlement(7, Decimal("100"), Decimal("15"), Decimal("85")),
        SellerSettlement(8, Decimal("20"), Decimal("3"), Decimal("17")),
    )

    posted = await ledger.post_sale("HOS-1", "GBP", shares, NOW)

    assert len(posted) == 4
    assert await ledger.balance(7) == {"GBP": Decimal("85")}
    assert await ledger.balance(8) == {"GBP": Decimal("17")}

    reversals = await ledger.reverse("HOS-1", NOW)
    assert [r.type for r in reversals] == [TransactionType.REFUND] * 4
    assert await ledger.balance(7) == {"GBP": Decimal("0")}
    assert await ledger.reverse("HOS-1") == []
    assert len(ledger.entries) == 8


async def test_balance_is_per_currency():
    ledger = SellerLedger()
    await ledger.post_sale("HOS-1", "GBP", (SellerSettlement(7, Decimal("10"), Decimal("1.5"), Decimal("8.5")),))
    await ledger.post_sale("HOS-2", "USD", (SellerSettlement(7, Decimal("20"), Decimal("3"), Decimal("17")),))
    assert await ledger.balance(7) == {"GBP": Decimal("8.5"), "USD": Decimal("17")}


async def test_payout_debits_balance():
    ledger = SellerLedger()
    await ledger.post_sale("HOS-1", "GBP", (SellerSettlement(7, Decimal("100"), Decimal("15"), Decimal("85")),), NOW)

    payout = await ledger.post_payout(7, Decimal("50"), "gbp", processed_by="admin", now=NOW)

    assert payout.type is TransactionType.PAYOUT
    assert payout.amount == Decimal("-50")
    assert payout.currency == "GBP"
    assert payout.processed_by == "admin"
    assert await ledger.balance(7) == {"GBP": Decimal("35")}
    assert await ledger.payouts(7) == [payout]


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
async def test_payout_must_be_positive(amount):
    with pytest.raises(LedgerError):
        await SellerLedger().post_payout(7, amount, "GBP")


async def test_adjustment_is_signed():
    ledger = SellerLedger()
    await ledger.post_adjustment(7, Decimal("12.50"), "GBP", "Goodwill credit", processed_by="admin")
    await ledger.post_adjustment(7, Decimal("-2.50"), "GBP", "Packaging charge")

    assert await ledger.balance(7) == {"GBP": Decimal("10.00")}
    assert [e.type for e in ledger.entries] == [TransactionType.ADJUSTMENT] * 2

    with pytest.raises(LedgerError):
        await ledger.post_adjustment(7, Decimal("0"), "GBP", "Nothing")


async def test_reverse_transaction_posts_opposite_adjustment():
    ledger = SellerLedger()
    posted = await ledger.post_sale("HOS-1", "GBP", (SellerSettlement(7, Decimal("100"), Decimal("15"), Decimal("85")),), NOW)
    fee = next(e for e in posted if e.type is TransactionType.FEE)

    reversal = await ledger.reverse_transaction(fee.id, "Fee waived", processed_by="admin", now=NOW)

    assert reversal.type is TransactionType.ADJUSTMENT
    assert reversal.amount == Decimal("15")
    assert reversal.reference_id == fee.id
    assert reversal.description == f"Reversal of transaction {fee.id}. Reason: Fee waived"
    assert await ledger.balance(7) == {"GBP": Decimal("100")}


async def test_reverse_transaction_refusals():
    ledger = SellerLedger()
    posted = await ledger.post_sale("HOS-1", "GBP", (SellerSettlement(7, Decimal("100"), Decimal("15"), Decimal("85")),), NOW)
    sale = next(e for e in posted if e.type is TransactionType.SALE)
    fee = next(e for e in posted if e.type is TransactionType.FEE)
    reversal = await ledger.reverse_transaction(fee.id, "Fee waived")

    with pytest.raises(LedgerError, match="cannot be reversed"):
        await ledger.reverse_transaction(sale.id, "Sales are reversed per order")
    with pytest.raises(LedgerError, match="already reversed"):
        await ledger.reverse_transaction(fee.id, "Twice")
    with pytest.raises(LedgerError, match="cannot be reversed"):
        await ledger.reverse_transaction(reversal.id, "Undo the undo")
    with pytest.raises(LedgerError, match="no transaction"):
        await ledger.reverse_transaction("txn_missing", "Unknown")
