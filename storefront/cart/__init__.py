"""
Cart — lines, line pricing, mutations and per-user persistence.

    from storefront import cart as K

    state = K.add_item(K.EMPTY_CART, product, quantity=2)
    K.cart_subtotal(state.lines, "GBP")
    await store.save(K.cart_key(user_id), state)
"""

from __future__ import annotations

from storefront.cart._types import (
    ProductSnapshot,
    CartLine,
    CartState,
    EMPTY_CART,
    CartError,
)
from storefront.cart._pricing import (
    consumer_price,
    unit_price,
    line_total,
    cart_subtotal,
)
from storefront.cart._ops import (
    add_item,
    remove_item,
    update_quantity,
    clear,
    item_count,
    with_promo_code,
)
from storefront.cart._store import (
    GUEST_KEY,
    cart_key,
    dump_state,
    load_state,
    CartStore,
    MemoryCartStore,
    discard_guest_cart,
)
from storefront.cart._sqlalchemy import CartTable, SQLAlchemyCartStore

__all__ = (
    # Types
    "ProductSnapshot",
    "CartLine",
    "CartState",
    "EMPTY_CART",
    "CartError",
    # Pricing
    "consumer_price",
    "unit_price",
    "line_total",
    "cart_subtotal",
    # Mutations
    "add_item",
    "remove_item",
    "update_quantity",
    "clear",
    "item_count",
    "with_promo_code",
    # Store
    "GUEST_KEY",
    "cart_key",
    "dump_state",
    "load_state",
    "CartStore",
    "MemoryCartStore",
    "discard_guest_cart",
    "CartTable",
    "SQLAlchemyCartStore",
)
