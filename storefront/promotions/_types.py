"""
Promotion types — discount kinds as a tagged union.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

# ═══════════════════════════════════════════════════════════════════════════════
# Discount — one variant per promotion kind
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PercentageOff:
    """`percent` % off the whole subtotal."""

    percent: Decimal


@dataclass(frozen=True, slots=True)
class FixedAmountOff:
    """Flat amount off, in the order's currency."""

    amount: Decimal


@dataclass(frozen=True, slots=True)
class FreeShipping:
    """Shipping is waived; the subtotal is untouched."""


@dataclass(frozen=True, slots=True)
class TargetedPercentageOff:
    """
    `percent` % off the lines matched by the promotion's targeting.

    Note: Targeted lines are always valued at the consumer price,
    wholesale buyers included.
    """

    percent: Decimal


type Discount = PercentageOff | FixedAmountOff | FreeShipping | TargetedPercentageOff


# ═══════════════════════════════════════════════════════════════════════════════
# Promotion
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Promotion:
    """
    A stored promotion.

    Date window is inclusive on both ends. `max_usage=None` means unlimited.
    Targeting (category and/or product ids) restricts which carts qualify and,
    for TargetedPercentageOff, which lines are discounted.
    """

    id: int
    code: str
    discount: Discount
    description: str = ""
    min_spend: Decimal | None = None
    is_active: bool = True
    starts_on: date | None = None
    ends_on: date | None = None
    usage_count: int = 0
    max_usage: int | None = None
    applicable_category: str | None = None
    applicable_product_ids: frozenset[int] | None = field(default=None)

    @property
    def is_targeted(self) -> bool:
        return bool(self.applicable_category) or bool(self.applicable_product_ids)

    @property
    def waives_shipping(self) -> bool:
        return isinstance(self.discount, FreeShipping)


# ═══════════════════════════════════════════════════════════════════════════════
# Rejection — user-facing reasons
# ═══════════════════════════════════════════════════════════════════════════════


class PromotionRejection(Enum):
    NOT_VALID = "not_valid"
    MIN_SPEND_NOT_MET = "min_spend_not_met"
    CATEGORY_RESTRICTED = "category_restricted"
    PRODUCT_RESTRICTED = "product_restricted"

    def message(self, promotion: Promotion | None = None, currency: str | None = None) -> str:
        """Text shown to the shopper."""
        match self:
            case PromotionRejection.NOT_VALID:
                return "This code is not valid or has expired."
            case PromotionRejection.MIN_SPEND_NOT_MET:
                if promotion is not None and promotion.min_spend is not None:
                    amount = f"{promotion.min_spend:.2f}"
                    if currency:
                        amount = f"{amount} {currency}"
                    return f"You must spend {amount} to use this code."
                return "The minimum spend for this code has not been met."
            case PromotionRejection.CATEGORY_RESTRICTED:
                if promotion is not None and promotion.applicable_category:
                    return (
                        "This code is only valid for items in the "
                        f"'{promotion.applicable_category}' category."
                    )
                return "This code is only valid for items in selected categories."
            case PromotionRejection.PRODUCT_RESTRICTED:
                return "This code is not valid for the items in your cart."


__all__ = (
    "PercentageOff",
    "FixedAmountOff",
    "FreeShipping",
    "TargetedPercentageOff",
    "Discount",
    "Promotion",
    "PromotionRejection",
)
