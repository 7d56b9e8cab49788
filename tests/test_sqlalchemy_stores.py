import asyncio
from datetime import timedelta
from decimal import Decimal

import pytest

from storefront import cart as K
from storefront import idempotency as I
from storefront.checkout import CheckoutService
from storefront.db import create_database
from storefront.orders import (
    DuplicateOrder,
    SQLAlchemyOrderRepository,
    dump_order,
    load_order,
)
from storefront.promotions import MemoryPromotionRepository

from helpers import NOW, err, ok


@pytest.fixture
async def session_factory():
    factory, engine = await create_database("sqlite+aiosqlite:///:memory:")
    yield factory
    await engine.dispose()


@pytest.fixture
def sql_service(session_factory, gateway, promotions) -> CheckoutService:
    return CheckoutService(
        gateway=gateway,
        orders=SQLAlchemyOrderRepository(session_factory),
        promotions=MemoryPromotionRepository(promotions),
        carts=K.SQLAlchemyCartStore(session_factory),
        idempotency_store=I.SQLAlchemyStore(session_factory, dump=dump_order, load=load_order),
        clock=lambda: NOW,
    )


async def test_cart_store(session_factory, hundred_pound_cart):
    store = K.SQLAlchemyCartStore(session_factory)
    assert await store.load("cart_1") is None

    await store.save("cart_1", hundred_pound_cart)
    assert await store.load("cart_1") == hundred_pound_cart

    with_code = K.with_promo_code(hundred_pound_cart, "SAVE10")
    await store.save("cart_1", with_code)
    assert (await store.load("cart_1")).promo_code == "SAVE10"

    assert await store.delete("cart_1") is True
    assert await store.delete("cart_1") is False


async def test_idempotency_store_lifecycle(session_factory):
    store = I.SQLAlchemyStore(session_factory)

    assert ok(await store.get("k")) is None
    assert ok(await store.set_pending("k", timedelta(hours=1))) is True
    assert ok(await store.set_pending("k", timedelta(hours=1))) is False
    assert ok(await store.get("k")).is_pending

    ok(await store.set_completed("k", "done", None))
    record = ok(await store.get("k"))
    assert record.is_completed
    assert record.value == "done"

    assert ok(await store.delete("k")) is True
    assert ok(await store.get("k")) is None


async def test_idempotency_store_expired_claim_is_reclaimed(session_factory):
    store = I.SQLAlchemyStore(session_factory)
    ok(await store.set_pending("k", timedelta(milliseconds=10)))
    await asyncio.sleep(0.03)
    assert ok(await store.get("k")) is None
    assert ok(await store.set_pending("k", None)) is True


async def test_completing_unknown_key_is_a_store_error(session_factory):
    store = I.SQLAlchemyStore(session_factory)
    assert "not found" in err(await store.set_completed("missing", "x", None)).message


async def test_checkout_over_sqlalchemy(sql_service, session_factory, hundred_pound_cart, request_for):
    await sql_service.carts.save("cart_42", hundred_pound_cart)

    order = ok(await sql_service.place_order(request_for()))
    stored = await sql_service.orders.get(order.id)

    assert stored == order
    assert stored.totals.total == Decimal("125.99")
    assert await sql_service.carts.load("cart_42") is None

    replayed = ok(await sql_service.place_order(request_for()))
    assert replayed == order
    assert len(sql_service.gateway.charges) == 1


async def test_duplicate_order_id(session_factory, service, hundred_pound_cart, request_for):
    await service.carts.save("cart_42", hundred_pound_cart)
    order = ok(await service.place_order(request_for()))

    repo = SQLAlchemyOrderRepository(session_factory)
    await repo.add(order)
    with pytest.raises(DuplicateOrder):
        await repo.add(order)
    assert await repo.delete(order.id) is True
    assert await repo.get(order.id) is None
