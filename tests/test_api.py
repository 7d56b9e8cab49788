from decimal import Decimal

import httpx
import pytest

from storefront.api import create_app
from storefront.payments import SimulatedGateway

WAND = {"id": 1, "sub_category": "Wands", "pricing": {"GBP": "50"}, "seller_id": 7}

ADDRESS = {
    "name": "Hermione Granger",
    "line1": "8 Heathgate",
    "city": "London",
    "postcode": "NW11 7AR",
    "country": "gb",
}


@pytest.fixture
async def client(service):
    transport = httpx.ASGITransport(app=create_app(service))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def checkout_body(key="submit-1", **overrides):
    body = {
        "idempotency_key": key,
        "cart_key": "cart_42",
        "currency": "GBP",
        "address": ADDRESS,
        "shipping": {"carrier_id": "owl-post", "method": "Standard"},
    }
    body.update(overrides)
    return body


# ═══════════════════════════════════════════════════════════════════════════════
# /cart
# ═══════════════════════════════════════════════════════════════════════════════


async def test_cart_add_update_and_read(client):
    resp = await client.post("/cart/items", json={"cart_key": "cart_42", "product": WAND, "quantity": 2})
    assert resp.status_code == 200
    assert resp.json()["cart"]["item_count"] == 2

    resp = await client.patch("/cart/items", json={"cart_key": "cart_42", "product_id": 1, "quantity": 3})
    assert resp.json()["cart"]["items"][0]["quantity"] == 3

    resp = await client.get("/cart", params={"cart_key": "cart_42"})
    cart = resp.json()["cart"]
    assert cart["item_count"] == 3
    assert cart["items"][0]["product"]["id"] == 1
    assert Decimal(cart["items"][0]["product"]["pricing"]["GBP"]) == Decimal("50")

    resp = await client.patch("/cart/items", json={"cart_key": "cart_42", "product_id": 1, "quantity": 0})
    assert resp.json()["cart"]["items"] == []


async def test_cart_rejects_bad_quantity(client):
    resp = await client.post("/cart/items", json={"cart_key": "cart_42", "product": WAND, "quantity": -1})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_QUANTITY"


async def test_unknown_cart_is_empty(client):
    resp = await client.get("/cart", params={"cart_key": "nobody"})
    assert resp.status_code == 200
    assert resp.json()["cart"] == {"items": [], "promo_code": None, "item_count": 0}


# ═══════════════════════════════════════════════════════════════════════════════
# /quote
# ═══════════════════════════════════════════════════════════════════════════════


async def test_quote(client):
    resp = await client.post("/quote", json={
        "items": [{"product": WAND, "quantity": 2}],
        "currency": "gbp",
        "country": "GB",
        "shipping_cost": "5.99",
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert Decimal(body["totals"]["total"]) == Decimal("125.99")
    assert Decimal(body["totals"]["platform_fee"]["local"]) == Decimal("15")


async def test_quote_with_ineligible_code(client):
    resp = await client.post("/quote", json={
        "items": [{"product": WAND, "quantity": 2}],
        "currency": "GBP",
        "country": "GB",
        "promo_code": "bigspend",
    })

    assert resp.status_code == 422
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "MIN_SPEND_NOT_MET"
    assert "200.00 GBP" in body["error"]["message"]


async def test_quote_rejects_bad_quantity(client):
    resp = await client.post("/quote", json={
        "items": [{"product": WAND, "quantity": 0}],
        "currency": "GBP",
        "country": "GB",
    })
    assert resp.status_code == 422


# ═══════════════════════════════════════════════════════════════════════════════
# /promotions/apply
# ═══════════════════════════════════════════════════════════════════════════════


async def test_apply_promo(client, service, hundred_pound_cart):
    await service.carts.save("cart_42", hundred_pound_cart)

    resp = await client.post("/promotions/apply", json={"cart_key": "cart_42", "code": "save10", "currency": "GBP"})

    assert resp.status_code == 200
    promo = resp.json()["promotion"]
    assert promo["code"] == "SAVE10"
    assert promo["kind"] == "percentage"
    assert Decimal(promo["value"]) == Decimal("10")


async def test_apply_unknown_promo(client, service, hundred_pound_cart):
    await service.carts.save("cart_42", hundred_pound_cart)

    resp = await client.post("/promotions/apply", json={"cart_key": "cart_42", "code": "nope", "currency": "GBP"})

    assert resp.status_code == 422
    assert resp.json()["error"] == {"code": "NOT_VALID", "message": "This code is not valid or has expired."}


# ═══════════════════════════════════════════════════════════════════════════════
# /checkout
# ═══════════════════════════════════════════════════════════════════════════════


async def test_checkout_created_and_replayed(client, service, hundred_pound_cart):
    await service.carts.save("cart_42", hundred_pound_cart)

    first = await client.post("/checkout", json=checkout_body())
    again = await client.post("/checkout", json=checkout_body())

    assert first.status_code == 201
    order = first.json()["order"]
    assert order["id"].startswith("HOS-")
    assert order["status"] == "Processing"
    assert Decimal(order["totals"]["total"]) == Decimal("125.99")

    assert again.status_code == 201
    assert again.json()["order"]["id"] == order["id"]


async def test_checkout_declined(client, service, hundred_pound_cart):
    service.gateway = SimulatedGateway(success_rate=0.0)
    await service.carts.save("cart_42", hundred_pound_cart)

    resp = await client.post("/checkout", json=checkout_body())

    assert resp.status_code == 402
    assert resp.json()["error"]["code"] == "PAYMENT_FAILED"
    assert await service.carts.load("cart_42") == hundred_pound_cart


async def test_checkout_empty_cart(client):
    resp = await client.post("/checkout", json=checkout_body())
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "EMPTY_CART"


async def test_checkout_unserved_shipping(client, service, hundred_pound_cart):
    await service.carts.save("cart_42", hundred_pound_cart)

    resp = await client.post("/checkout", json=checkout_body(shipping={"carrier_id": "owl-post", "method": "Teleport"}))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "NO_SHIPPING_OPTION"


# ═══════════════════════════════════════════════════════════════════════════════
# /shipping/options
# ═══════════════════════════════════════════════════════════════════════════════


async def test_shipping_options(client):
    resp = await client.get("/shipping/options", params={"country": "gb"})

    assert resp.status_code == 200
    options = resp.json()["options"]
    assert [o["carrier_id"] for o in options] == ["knight-bus", "owl-post", "owl-post"]
    assert options[0]["estimated_delivery"] == "3-5 business days"


async def test_shipping_options_requires_country(client):
    resp = await client.get("/shipping/options")
    assert resp.status_code == 422


# ═══════════════════════════════════════════════════════════════════════════════
# Default app
# ═══════════════════════════════════════════════════════════════════════════════


def test_default_app_full_flow():
    from fastapi.testclient import TestClient

    from storefront.api import create_default_app
    from storefront.config import Settings
    from storefront.promotions import PercentageOff, Promotion

    app = create_default_app(
        Settings(payment_delay_seconds=0, payment_success_rate=1.0),
        promotions=[Promotion(1, "SAVE10", PercentageOff(Decimal("10")), min_spend=Decimal("50"))],
    )

    with TestClient(app) as c:
        resp = c.post("/checkout", json=checkout_body())
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "EMPTY_CART"

        resp = c.post("/cart/items", json={"cart_key": "cart_42", "product": WAND, "quantity": 2})
        assert resp.json()["cart"]["item_count"] == 2

        resp = c.post("/promotions/apply", json={"cart_key": "cart_42", "code": "save10", "currency": "GBP"})
        assert resp.status_code == 200
        assert c.get("/cart", params={"cart_key": "cart_42"}).json()["cart"]["promo_code"] == "SAVE10"

        resp = c.post("/checkout", json=checkout_body())
        assert resp.status_code == 201
        order = resp.json()["order"]
        assert order["promotion_code"] == "SAVE10"
        assert Decimal(order["totals"]["total"]) == Decimal("113.99")

        assert c.get("/cart", params={"cart_key": "cart_42"}).json()["cart"]["items"] == []
        assert c.post("/checkout", json=checkout_body()).json()["order"]["id"] == order["id"]

        resp = c.get("/shipping/options", params={"country": "FR"})
        assert [o["method"] for o in resp.json()["options"]] == ["Standard"]
