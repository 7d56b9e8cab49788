"""
Promotion usage — redemption counting and the promotion repository.

Counting happens after an order is placed, never while pricing it.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Protocol

from storefront.promotions._types import Promotion


def record_usage(promotion: Promotion) -> Promotion:
    """Copy with one more redemption."""
    return replace(promotion, usage_count=promotion.usage_count + 1)


def has_capacity(promotion: Promotion) -> bool:
    return promotion.max_usage is None or promotion.usage_count < promotion.max_usage


def release_usage(promotion: Promotion) -> Promotion:
    """Undo one redemption (never below zero)."""
    return replace(promotion, usage_count=max(promotion.usage_count - 1, 0))


class PromotionNotFound(LookupError):
    """No promotion with that id."""


class PromotionExhausted(Exception):
    """The promotion reached its usage cap before this redemption."""

    def __init__(self, promotion: Promotion) -> None:
        super().__init__(f"Promotion {promotion.code} has reached its usage limit")
        self.promotion = promotion


# ═══════════════════════════════════════════════════════════════════════════════
# PromotionRepository Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class PromotionRepository(Protocol):
    """
    Promotion storage.

    increment/decrement must be atomic per promotion: two checkouts
    redeeming the same code never lose a count, and increment never
    takes usage_count past max_usage.
    """

    async def list(self) -> list[Promotion]:
        ...

    async def get(self, promotion_id: int) -> Promotion | None:
        ...

    async def add(self, promotion: Promotion) -> Promotion:
        ...

    async def save(self, promotion: Promotion) -> Promotion:
        ...

    async def increment_usage(self, promotion_id: int) -> Promotion:
        """Raises PromotionNotFound, PromotionExhausted."""
        ...

    async def decrement_usage(self, promotion_id: int) -> Promotion:
        """Raises PromotionNotFound."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Repository — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryPromotionRepository:
    """In-memory promotions keyed by id."""

    def __init__(self, promotions: list[Promotion] | None = None) -> None:
        self._promotions: dict[int, Promotion] = {p.id: p for p in promotions or ()}
        self._lock = asyncio.Lock()

    async def list(self) -> list[Promotion]:
        async with self._lock:
            return list(self._promotions.values())

    async def get(self, promotion_id: int) -> Promotion | None:
        async with self._lock:
            return self._promotions.get(promotion_id)

    async def add(self, promotion: Promotion) -> Promotion:
        async with self._lock:
            self._promotions[promotion.id] = promotion
            return promotion

    async def save(self, promotion: Promotion) -> Promotion:
        async with self._lock:
            if promotion.id not in self._promotions:
                raise PromotionNotFound(promotion.id)
            self._promotions[promotion.id] = promotion
            return promotion

    async def increment_usage(self, promotion_id: int) -> Promotion:
        async with self._lock:
            current = self._require(promotion_id)
            if not has_capacity(current):
                raise PromotionExhausted(current)
            updated = record_usage(current)
            self._promotions[promotion_id] = updated
            return updated

    async def decrement_usage(self, promotion_id: int) -> Promotion:
        async with self._lock:
            updated = release_usage(self._require(promotion_id))
            self._promotions[promotion_id] = updated
            return updated

    def _require(self, promotion_id: int) -> Promotion:
        try:
            return self._promotions[promotion_id]
        except KeyError:
            raise PromotionNotFound(promotion_id) from None


__all__ = (
    "record_usage",
    "has_capacity",
    "release_usage",
    "PromotionNotFound",
    "PromotionExhausted",
    "PromotionRepository",
    "MemoryPromotionRepository",
)
