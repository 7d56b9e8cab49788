"""
Promotions — discount kinds, code lookup, cart eligibility, usage.

    from storefront import promotions as P

    promo = P.resolve_active_promotion("SUMMER10", await repo.list(), datetime.now())

    match P.apply_promo_code("summer10", await repo.list(), lines, "GBP", now):
        case Ok(promo):
            ...
        case Error(reason):
            print(reason.message())
"""

from __future__ import annotations

from storefront.promotions._types import (
    PercentageOff,
    FixedAmountOff,
    FreeShipping,
    TargetedPercentageOff,
    Discount,
    Promotion,
    PromotionRejection,
)
from storefront.promotions._resolve import (
    is_usable,
    find_by_code,
    resolve_active_promotion,
)
from storefront.promotions._eligibility import (
    line_is_targeted,
    meets_min_spend,
    check_eligibility,
    apply_promo_code,
)
from storefront.promotions._usage import (
    record_usage,
    has_capacity,
    release_usage,
    PromotionNotFound,
    PromotionExhausted,
    PromotionRepository,
    MemoryPromotionRepository,
)

__all__ = (
    # Types
    "PercentageOff",
    "FixedAmountOff",
    "FreeShipping",
    "TargetedPercentageOff",
    "Discount",
    "Promotion",
    "PromotionRejection",
    # Lookup
    "is_usable",
    "find_by_code",
    "resolve_active_promotion",
    # Eligibility
    "line_is_targeted",
    "meets_min_spend",
    "check_eligibility",
    "apply_promo_code",
    # Usage
    "record_usage",
    "has_capacity",
    "release_usage",
    "PromotionNotFound",
    "PromotionExhausted",
    "PromotionRepository",
    "MemoryPromotionRepository",
)
