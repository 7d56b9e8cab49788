"""
Eligibility — may this (usable) promotion be applied to this cart?

Lookup answers "does the code exist and is it live"; eligibility answers
"does the cart qualify". Both failures come back as a PromotionRejection.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from kungfu import Result, Ok, Error

from storefront.cart._pricing import cart_subtotal
from storefront.cart._types import CartLine
from storefront.promotions._types import Promotion, PromotionRejection
from storefront.promotions._resolve import resolve_active_promotion


def line_is_targeted(promotion: Promotion, line: CartLine) -> bool:
    """Category match OR product-id match. Untargeted promotions match nothing."""
    category = promotion.applicable_category
    if category and line.product.sub_category == category:
        return True
    product_ids = promotion.applicable_product_ids
    return bool(product_ids) and line.product.id in product_ids


def meets_min_spend(
    promotion: Promotion,
    lines: Iterable[CartLine],
    currency: str,
    wholesale: bool = False,
) -> bool:
    if promotion.min_spend is None:
        return True
    return cart_subtotal(lines, currency, wholesale) >= promotion.min_spend


def check_eligibility(
    promotion: Promotion,
    lines: Sequence[CartLine],
    currency: str,
    wholesale: bool = False,
) -> Result[Promotion, PromotionRejection]:
    """
    Cart-side checks for an already resolved promotion.

    - min spend against the buyer's subtotal in `currency`
    - targeting: satisfied when any line matches the category or the product ids

    Example:
        match check_eligibility(promo, state.lines, "GBP"):
            case Ok(promo):
                state = with_promo_code(state, promo.code)
            case Error(reason):
                show(reason.message(promo, "GBP"))
    """
    if not meets_min_spend(promotion, lines, currency, wholesale):
        return Error(PromotionRejection.MIN_SPEND_NOT_MET)

    if promotion.is_targeted and not any(line_is_targeted(promotion, line) for line in lines):
        if promotion.applicable_category:
            return Error(PromotionRejection.CATEGORY_RESTRICTED)
        return Error(PromotionRejection.PRODUCT_RESTRICTED)

    return Ok(promotion)


def apply_promo_code(
    code: str,
    candidates: Iterable[Promotion],
    lines: Sequence[CartLine],
    currency: str,
    now: date | datetime,
    wholesale: bool = False,
) -> Result[Promotion, PromotionRejection]:
    """Lookup + eligibility. Unknown or unusable codes are NOT_VALID."""
    promotion = resolve_active_promotion(code, candidates, now)
    if promotion is None:
        return Error(PromotionRejection.NOT_VALID)
    return check_eligibility(promotion, lines, currency, wholesale)


__all__ = (
    "line_is_targeted",
    "meets_min_spend",
    "check_eligibility",
    "apply_promo_code",
)
