"""
Cart types — product snapshots and lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

# ═══════════════════════════════════════════════════════════════════════════════
# Product Snapshot — what the cart knows about a product
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ProductSnapshot:
    """
    Product as it was when added to the cart.

    pricing: consumer price per currency code.
    trade_pricing: wholesale price per currency code (B2B buyers only).
    """

    id: int
    sub_category: str
    pricing: dict[str, Decimal] = field(default_factory=dict)
    trade_pricing: dict[str, Decimal] | None = None
    seller_id: int | None = None
    name: str = ""


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Line / State
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartLine:
    product: ProductSnapshot
    quantity: int
    variation_id: int | None = None

    def matches(self, product_id: int, variation_id: int | None) -> bool:
        return self.product.id == product_id and self.variation_id == variation_id


@dataclass(frozen=True, slots=True)
class CartState:
    """
    Persisted cart: lines plus the code of the applied promotion.

    Note: Only the code is kept. Checkout resolves it again, so a
    promotion edited or exhausted since it was applied is never priced.
    """

    lines: tuple[CartLine, ...] = ()
    promo_code: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.lines


EMPTY_CART = CartState()


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CartError(ValueError):
    """Invalid cart mutation (e.g. non-positive quantity)."""


__all__ = (
    "ProductSnapshot",
    "CartLine",
    "CartState",
    "EMPTY_CART",
    "CartError",
)
