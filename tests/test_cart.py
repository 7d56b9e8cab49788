from decimal import Decimal

import pytest

from storefront import cart as K


def test_add_item_merges_same_product_and_variation(wand):
    state = K.add_item(K.EMPTY_CART, wand, 1)
    state = K.add_item(state, wand, 2)
    assert len(state.lines) == 1
    assert state.lines[0].quantity == 3


def test_variations_are_separate_lines(wand):
    state = K.add_item(K.EMPTY_CART, wand, 1, variation_id=1)
    state = K.add_item(state, wand, 1, variation_id=2)
    assert len(state.lines) == 2
    assert K.item_count(state) == 2


@pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
def test_add_item_rejects_invalid_quantity(wand, quantity):
    with pytest.raises(K.CartError):
        K.add_item(K.EMPTY_CART, wand, quantity)


def test_update_quantity_to_zero_removes_line(wand, cloak):
    state = K.add_item(K.add_item(K.EMPTY_CART, wand), cloak)
    state = K.update_quantity(state, wand.id, 0)
    assert [line.product.id for line in state.lines] == [cloak.id]


def test_update_quantity_sets_value(wand):
    state = K.update_quantity(K.add_item(K.EMPTY_CART, wand), wand.id, 4)
    assert state.lines[0].quantity == 4


def test_clear_drops_lines_and_promotion(wand):
    state = K.with_promo_code(K.add_item(K.EMPTY_CART, wand), "save10")
    assert state.promo_code == "SAVE10"
    assert K.clear(state) == K.EMPTY_CART


def test_subtotal_uses_consumer_price_by_default(hundred_pound_cart):
    assert K.cart_subtotal(hundred_pound_cart.lines, "GBP") == Decimal("100")


def test_missing_currency_prices_at_zero(hundred_pound_cart):
    assert K.cart_subtotal(hundred_pound_cart.lines, "JPY") == Decimal("0")


def test_wholesale_uses_trade_price_when_present(make_product):
    traded = make_product(3, "40", trade_gbp="30")
    plain = make_product(4, "10")
    state = K.add_item(K.add_item(K.EMPTY_CART, traded, 2), plain, 1)
    assert K.cart_subtotal(state.lines, "GBP", wholesale=True) == Decimal("70")
    assert K.cart_subtotal(state.lines, "GBP") == Decimal("90")


def test_cart_key_per_user():
    assert K.cart_key(42) == "cart_42"
    assert K.cart_key(None) == K.GUEST_KEY


def test_state_survives_json(hundred_pound_cart):
    state = K.with_promo_code(hundred_pound_cart, "SAVE10")
    assert K.load_state(K.dump_state(state)) == state


async def test_memory_store_roundtrip_and_guest_discard(hundred_pound_cart):
    store = K.MemoryCartStore()
    assert await store.load("cart_1") is None

    await store.save("cart_1", hundred_pound_cart)
    await store.save(K.GUEST_KEY, hundred_pound_cart)
    assert await store.load("cart_1") == hundred_pound_cart

    assert await K.discard_guest_cart(store) is True
    assert await K.discard_guest_cart(store) is False
    assert await store.delete("cart_1") is True
