"""
Promotion lookup — is this code usable right now?
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from storefront._logging import get_logger
from storefront.promotions._types import Promotion

log = get_logger(__name__)


def _as_date(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def is_usable(promotion: Promotion, now: date | datetime) -> bool:
    """
    Active, inside its (inclusive) date window, under its usage cap.

    Cart-dependent rules (min spend, targeting) live in eligibility.
    """
    today = _as_date(now)
    if not promotion.is_active:
        return False
    if promotion.starts_on is not None and today < promotion.starts_on:
        return False
    if promotion.ends_on is not None and today > promotion.ends_on:
        return False
    if promotion.max_usage is not None and promotion.usage_count >= promotion.max_usage:
        return False
    return True


def find_by_code(code: str, candidates: Iterable[Promotion]) -> Promotion | None:
    """Case-insensitive exact code match."""
    wanted = code.strip().upper()
    if not wanted:
        return None
    return next((p for p in candidates if p.code.upper() == wanted), None)


def resolve_active_promotion(
    code: str,
    candidates: Iterable[Promotion],
    now: date | datetime,
) -> Promotion | None:
    """
    Find the promotion for `code` if it can be used at `now`.

    Returns None (never raises) for unknown, inactive, not-yet-started,
    expired or exhausted codes.

    Example:
        promo = resolve_active_promotion("summer10", repo_promotions, datetime.now())
        if promo is None:
            ...  # PromotionRejection.NOT_VALID
    """
    promotion = find_by_code(code, candidates)
    if promotion is None:
        log.debug("promotion code %r not found", code)
        return None
    if not is_usable(promotion, now):
        log.debug("promotion %s is not usable at %s", promotion.code, now)
        return None
    return promotion


__all__ = ("is_usable", "find_by_code", "resolve_active_promotion")
