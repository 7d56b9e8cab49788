"""
Cart mutations.

Every function returns a new CartState; quantities are validated here so
pricing can assume positive integers.
"""

from __future__ import annotations

from dataclasses import replace

from storefront.cart._types import CartLine, CartState, CartError, ProductSnapshot, EMPTY_CART


def add_item(
    state: CartState,
    product: ProductSnapshot,
    quantity: int = 1,
    variation_id: int | None = None,
) -> CartState:
    """
    Add `quantity` of a product, merging with an existing line.

    Raises:
        CartError: quantity is not a positive integer.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise CartError(f"quantity must be a positive integer, got {quantity!r}")

    for index, line in enumerate(state.lines):
        if line.matches(product.id, variation_id):
            merged = replace(line, quantity=line.quantity + quantity)
            lines = (*state.lines[:index], merged, *state.lines[index + 1:])
            return replace(state, lines=lines)

    return replace(state, lines=(*state.lines, CartLine(product, quantity, variation_id)))


def remove_item(
    state: CartState,
    product_id: int,
    variation_id: int | None = None,
) -> CartState:
    lines = tuple(line for line in state.lines if not line.matches(product_id, variation_id))
    return replace(state, lines=lines)


def update_quantity(
    state: CartState,
    product_id: int,
    quantity: int,
    variation_id: int | None = None,
) -> CartState:
    """Set a line's quantity. Zero or less removes the line."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise CartError(f"quantity must be an integer, got {quantity!r}")
    if quantity <= 0:
        return remove_item(state, product_id, variation_id)

    lines = tuple(
        replace(line, quantity=quantity) if line.matches(product_id, variation_id) else line
        for line in state.lines
    )
    return replace(state, lines=lines)


def clear(state: CartState) -> CartState:
    """Empty cart; the applied promotion goes with it."""
    return EMPTY_CART


def item_count(state: CartState) -> int:
    return sum(line.quantity for line in state.lines)


def with_promo_code(state: CartState, code: str | None) -> CartState:
    """Attach (or detach with None) a promotion code."""
    return replace(state, promo_code=code.strip().upper() if code else None)


__all__ = (
    "add_item",
    "remove_item",
    "update_quantity",
    "clear",
    "item_count",
    "with_promo_code",
)
