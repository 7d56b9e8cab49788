"""
Cart store — per-user persisted cart state.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from pydantic import TypeAdapter

from storefront.cart._types import CartState

GUEST_KEY = "cart_guest"

_STATE_ADAPTER: TypeAdapter[CartState] = TypeAdapter(CartState)


def cart_key(user_id: int | str | None) -> str:
    """Storage key for a user's cart; anonymous shoppers share the guest key."""
    return f"cart_{user_id}" if user_id is not None else GUEST_KEY


def dump_state(state: CartState) -> str:
    return _STATE_ADAPTER.dump_json(state).decode()


def load_state(payload: str | bytes) -> CartState:
    return _STATE_ADAPTER.validate_json(payload)


# ═══════════════════════════════════════════════════════════════════════════════
# CartStore Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore(Protocol):
    """
    Cart persistence protocol.

    Implement this for custom backends (browser session, Redis, SQL...).
    """

    async def load(self, key: str) -> CartState | None:
        """Stored state, or None when the key has no cart."""
        ...

    async def save(self, key: str, state: CartState) -> None:
        ...

    async def delete(self, key: str) -> bool:
        """Delete cart. Returns True if it existed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryCartStore:
    """In-memory cart store. Data does not survive a restart."""

    def __init__(self) -> None:
        self._carts: dict[str, CartState] = {}
        self._lock = asyncio.Lock()

    async def load(self, key: str) -> CartState | None:
        async with self._lock:
            return self._carts.get(key)

    async def save(self, key: str, state: CartState) -> None:
        async with self._lock:
            self._carts[key] = state

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._carts.pop(key, None) is not None


async def discard_guest_cart(store: CartStore) -> bool:
    """Drop the guest cart once a shopper signs in."""
    return await store.delete(GUEST_KEY)


__all__ = (
    "GUEST_KEY",
    "cart_key",
    "dump_state",
    "load_state",
    "CartStore",
    "MemoryCartStore",
    "discard_guest_cart",
)
