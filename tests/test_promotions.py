import asyncio
from datetime import date, datetime
from decimal import Decimal

import pytest

from storefront import cart as K
from storefront import promotions as P

from helpers import NOW, err, ok


def by_code(promotions, code):
    return next(p for p in promotions if p.code == code)


# ═══════════════════════════════════════════════════════════════════════════════
# Lookup
# ═══════════════════════════════════════════════════════════════════════════════


def test_lookup_is_case_insensitive(promotions):
    assert P.resolve_active_promotion("  save10 ", promotions, NOW).id == 1


def test_unknown_code_resolves_to_none(promotions):
    assert P.resolve_active_promotion("NOPE", promotions, NOW) is None
    assert P.resolve_active_promotion("", promotions, NOW) is None


def test_date_window_is_inclusive(promotions):
    expired = by_code(promotions, "EXPIRED")
    assert P.is_usable(expired, date(2026, 1, 1))
    assert P.is_usable(expired, datetime(2026, 1, 31, 23, 59))
    assert not P.is_usable(expired, date(2025, 12, 31))
    assert not P.is_usable(expired, date(2026, 2, 1))


def test_exhausted_and_inactive_are_not_usable(promotions):
    assert not P.is_usable(by_code(promotions, "ONCE"), NOW)
    inactive = P.Promotion(99, "OFF", P.FreeShipping(), is_active=False)
    assert not P.is_usable(inactive, NOW)


def test_no_usage_cap_means_unlimited():
    promo = P.Promotion(1, "ANY", P.FreeShipping(), usage_count=10_000)
    assert P.is_usable(promo, NOW)


# ═══════════════════════════════════════════════════════════════════════════════
# Eligibility
# ═══════════════════════════════════════════════════════════════════════════════


def test_apply_valid_code(promotions, hundred_pound_cart):
    result = P.apply_promo_code("save10", promotions, hundred_pound_cart.lines, "GBP", NOW)
    assert ok(result) == by_code(promotions, "SAVE10")


@pytest.mark.parametrize("code", ["NOPE", "EXPIRED", "ONCE"])
def test_unusable_codes_are_not_valid(promotions, hundred_pound_cart, code):
    result = P.apply_promo_code(code, promotions, hundred_pound_cart.lines, "GBP", NOW)
    assert err(result) is P.PromotionRejection.NOT_VALID


def test_min_spend_not_met(promotions, hundred_pound_cart):
    result = P.apply_promo_code("BIGSPEND", promotions, hundred_pound_cart.lines, "GBP", NOW)
    assert err(result) is P.PromotionRejection.MIN_SPEND_NOT_MET
    assert P.PromotionRejection.MIN_SPEND_NOT_MET.message(by_code(promotions, "BIGSPEND"), "GBP") == (
        "You must spend 200.00 GBP to use this code."
    )


def test_min_spend_uses_wholesale_subtotal(make_product):
    traded = make_product(3, "100", trade_gbp="40")
    state = K.add_item(K.EMPTY_CART, traded)
    promo = P.Promotion(1, "OVER50", P.FreeShipping(), min_spend=Decimal("50"))
    assert ok(P.check_eligibility(promo, state.lines, "GBP")) == promo
    assert err(P.check_eligibility(promo, state.lines, "GBP", wholesale=True)) is P.PromotionRejection.MIN_SPEND_NOT_MET


def test_category_restriction(promotions, cloak):
    state = K.add_item(K.EMPTY_CART, cloak, 4)
    result = P.apply_promo_code("WANDS20", promotions, state.lines, "GBP", NOW)
    assert err(result) is P.PromotionRejection.CATEGORY_RESTRICTED
    assert "'Wands'" in P.PromotionRejection.CATEGORY_RESTRICTED.message(by_code(promotions, "WANDS20"))


def test_product_restriction(cloak, wand):
    promo = P.Promotion(1, "WANDONLY", P.TargetedPercentageOff(Decimal("10")), applicable_product_ids=frozenset({wand.id}))
    only_cloak = K.add_item(K.EMPTY_CART, cloak)
    assert err(P.check_eligibility(promo, only_cloak.lines, "GBP")) is P.PromotionRejection.PRODUCT_RESTRICTED
    mixed = K.add_item(only_cloak, wand)
    assert ok(P.check_eligibility(promo, mixed.lines, "GBP")) == promo


def test_targeting_matches_category_or_product(wand, cloak):
    promo = P.Promotion(
        1, "EITHER", P.TargetedPercentageOff(Decimal("10")),
        applicable_category="Wands",
        applicable_product_ids=frozenset({cloak.id}),
    )
    assert P.line_is_targeted(promo, K.CartLine(wand, 1))
    assert P.line_is_targeted(promo, K.CartLine(cloak, 1))


# ═══════════════════════════════════════════════════════════════════════════════
# Usage
# ═══════════════════════════════════════════════════════════════════════════════


async def test_repository_counts_usage(promotions):
    repo = P.MemoryPromotionRepository(promotions)
    assert (await repo.increment_usage(1)).usage_count == 1
    assert (await repo.increment_usage(1)).usage_count == 2
    assert (await repo.decrement_usage(1)).usage_count == 1
    assert (await repo.get(1)).usage_count == 1


async def test_release_never_goes_negative(promotions):
    repo = P.MemoryPromotionRepository(promotions)
    assert (await repo.decrement_usage(2)).usage_count == 0


async def test_unknown_promotion_raises():
    repo = P.MemoryPromotionRepository()
    with pytest.raises(P.PromotionNotFound):
        await repo.increment_usage(404)


async def test_cap_reached_after_usage():
    repo = P.MemoryPromotionRepository([P.Promotion(1, "TWICE", P.FreeShipping(), max_usage=2)])
    await repo.increment_usage(1)
    assert P.is_usable(await repo.get(1), NOW)
    await repo.increment_usage(1)
    assert not P.is_usable(await repo.get(1), NOW)
    with pytest.raises(P.PromotionExhausted):
        await repo.increment_usage(1)
    assert (await repo.get(1)).usage_count == 2


async def test_concurrent_redemptions_respect_cap():
    repo = P.MemoryPromotionRepository([P.Promotion(1, "LAST", P.FreeShipping(), max_usage=1)])

    results = await asyncio.gather(
        repo.increment_usage(1),
        repo.increment_usage(1),
        return_exceptions=True,
    )

    assert sum(isinstance(r, P.Promotion) for r in results) == 1
    assert sum(isinstance(r, P.PromotionExhausted) for r in results) == 1
    assert (await repo.get(1)).usage_count == 1


def test_unlimited_promotion_has_capacity():
    assert P.has_capacity(P.Promotion(1, "ALWAYS", P.FreeShipping(), usage_count=10_000))
