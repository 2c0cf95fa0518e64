"""
tests/test_badges.py — Unit Tests for the Badge Tier Engine
============================================================

Covers the classifier, the next-tier projector, the reviews-needed formula
and the input clamping that keeps every function total.
"""

from __future__ import annotations

import pytest

from sync_reputation.engine.badges import (
    BADGE_CONFIG,
    MIN_REVIEW_COUNT,
    TIER_ORDER,
    BadgeTier,
    NextTier,
    apply_positive_reviews,
    calculate_next_tier,
    classify_badge,
    coerce_tier,
    is_upgrade,
    positive_count,
    reviews_needed,
    tier_rank,
)


# ---------------------------------------------------------------------------
# Tier table
# ---------------------------------------------------------------------------
class TestTierTable:
    def test_thresholds(self):
        assert BADGE_CONFIG[BadgeTier.RECOMMENDED].percentage == 75
        assert BADGE_CONFIG[BadgeTier.HIGHLY_RECOMMENDED].percentage == 90
        assert BADGE_CONFIG[BadgeTier.VERY_HIGHLY_RECOMMENDED].percentage == 95
        assert all(d.min_reviews == MIN_REVIEW_COUNT == 3 for d in BADGE_CONFIG.values())

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            BADGE_CONFIG[BadgeTier.RECOMMENDED] = None  # type: ignore[index]

    def test_order_is_ascending(self):
        percentages = [BADGE_CONFIG[t].percentage for t in TIER_ORDER]
        assert percentages == sorted(percentages)

    def test_labels(self):
        assert [BADGE_CONFIG[t].label for t in TIER_ORDER] == [
            "Recommended", "Highly Recommended", "Very Highly Recommended",
        ]


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------
class TestClassifyBadge:
    @pytest.mark.parametrize("count,pct,expected", [
        (2, 100, None),
        (10, 80, BadgeTier.RECOMMENDED),
        (10, 92, BadgeTier.HIGHLY_RECOMMENDED),
        (50, 96, BadgeTier.VERY_HIGHLY_RECOMMENDED),
        (10, 74.9, None),
        (10, 75, BadgeTier.RECOMMENDED),
        (10, 90, BadgeTier.HIGHLY_RECOMMENDED),
        (10, 95, BadgeTier.VERY_HIGHLY_RECOMMENDED),
        (3, 100, BadgeTier.VERY_HIGHLY_RECOMMENDED),
    ])
    def test_scenarios(self, count, pct, expected):
        assert classify_badge(count, pct) is expected

    @pytest.mark.parametrize("count", [0, 1, 2])
    @pytest.mark.parametrize("pct", [0, 50, 75, 95, 100])
    def test_small_sample_never_badged(self, count, pct):
        assert classify_badge(count, pct) is None

    @pytest.mark.parametrize("count", [3, 7, 100, 5000])
    def test_top_tier_at_95_and_above(self, count):
        for pct in (95, 97.5, 100):
            assert classify_badge(count, pct) is BadgeTier.VERY_HIGHLY_RECOMMENDED

    @pytest.mark.parametrize("count", [3, 10, 50])
    def test_monotone_in_percentage(self, count):
        ranks = [tier_rank(classify_badge(count, p / 2)) for p in range(0, 201)]
        assert ranks == sorted(ranks)

    def test_negative_count_clamped(self):
        assert classify_badge(-5, 100) is None

    def test_percentage_clamped(self):
        assert classify_badge(10, 150) is BadgeTier.VERY_HIGHLY_RECOMMENDED
        assert classify_badge(10, -20) is None

    def test_garbage_input_is_no_badge(self):
        assert classify_badge("lots", 90) is None
        assert classify_badge(10, None) is None
        assert classify_badge(10, float("nan")) is None
        assert classify_badge(float("inf"), 90) is None


# ---------------------------------------------------------------------------
# Reviews-needed formula
# ---------------------------------------------------------------------------
class TestReviewsNeeded:
    def test_positive_count_rounds_half_up(self):
        assert positive_count(3, 50) == 2     # 1.5 → 2
        assert positive_count(20, 90) == 18
        assert positive_count(7, 71) == 5     # 4.97 → 5
        assert positive_count(0, 80) == 0

    def test_worked_example(self):
        # P = 18, X = ceil((0.95 * 20 - 18) / 0.05) = 20
        assert reviews_needed(20, 90, 95) == 20

    def test_already_above_target_is_zero(self):
        assert reviews_needed(10, 100, 75) == 0
        assert reviews_needed(20, 96, 95) == 0

    def test_exact_boundary(self):
        # 3 of 4 positive is exactly 75%
        assert reviews_needed(3, 67, 75) == 1

    def test_unreachable_target(self):
        assert reviews_needed(10, 50, 100) is None
        assert reviews_needed(10, 50, 120) is None

    def test_zero_target(self):
        assert reviews_needed(10, 0, 0) == 0

    def test_apply_positive_reviews(self):
        assert apply_positive_reviews(20, 90, 20) == (40, 95.0)
        assert apply_positive_reviews(0, 0, 0) == (0, 0.0)
        assert apply_positive_reviews(0, 0, 3) == (3, 100.0)


# ---------------------------------------------------------------------------
# Next-tier projector
# ---------------------------------------------------------------------------
class TestCalculateNextTier:
    def test_below_minimum_sample(self):
        nxt = calculate_next_tier(None, 1, 0)
        assert nxt == NextTier(BadgeTier.RECOMMENDED, "Recommended", 75, 2)
        assert nxt.to_dict() == {
            "tier": "recommended",
            "name": "Recommended",
            "percentage": 75,
            "reviewsNeeded": 2,
        }

    def test_zero_reviews_ignores_percentage(self):
        assert calculate_next_tier(None, 0, 100).reviews_needed == 3
        assert calculate_next_tier(None, 0, float("nan")).reviews_needed == 3

    def test_highly_to_very_highly(self):
        nxt = calculate_next_tier("highly_recommended", 20, 90)
        assert nxt.to_dict() == {
            "tier": "very_highly_recommended",
            "name": "Very Highly Recommended",
            "percentage": 95,
            "reviewsNeeded": 20,
        }

    def test_no_badge_below_75_targets_recommended(self):
        nxt = calculate_next_tier(None, 10, 50)
        assert nxt.tier is BadgeTier.RECOMMENDED
        # P = 5, X = ceil((7.5 - 5) / 0.25) = 10
        assert nxt.reviews_needed == 10

    def test_recommended_targets_highly(self):
        nxt = calculate_next_tier(BadgeTier.RECOMMENDED, 10, 80)
        assert nxt.tier is BadgeTier.HIGHLY_RECOMMENDED
        assert nxt.percentage == 90
        # P = 8, X = ceil((9 - 8) / 0.1) = 10
        assert nxt.reviews_needed == 10

    def test_top_tier_has_no_next(self):
        assert calculate_next_tier(BadgeTier.VERY_HIGHLY_RECOMMENDED, 50, 96) is None
        assert calculate_next_tier("very_highly_recommended", 0, 0) is None

    def test_unknown_tier_string_treated_as_none(self):
        assert calculate_next_tier("gold", 10, 50) == calculate_next_tier(None, 10, 50)

    @pytest.mark.parametrize("tier", [None, *TIER_ORDER])
    def test_none_only_for_top_tier(self, tier):
        nxt = calculate_next_tier(tier, 40, 85)
        if tier is BadgeTier.VERY_HIGHLY_RECOMMENDED:
            assert nxt is None
        else:
            assert nxt is not None

    @pytest.mark.parametrize("tier", [None, *TIER_ORDER[:-1]])
    def test_never_suggests_lower_tier(self, tier):
        for count in (0, 3, 12, 60):
            for pct in (0, 60, 80, 92):
                nxt = calculate_next_tier(tier, count, pct)
                assert tier_rank(nxt.tier) >= tier_rank(tier)


# ---------------------------------------------------------------------------
# Projection round-trip
# ---------------------------------------------------------------------------
class TestProjectionRoundTrip:
    """Applying ``reviews_needed`` positives reaches the projected tier,
    and one fewer does not."""

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_stored_highly_below_minimum_sample(self, count):
        for pct in range(0, 101):
            nxt = calculate_next_tier("highly_recommended", count, pct)
            assert nxt.tier is BadgeTier.VERY_HIGHLY_RECOMMENDED
            assert count + nxt.reviews_needed >= MIN_REVIEW_COUNT

            reached = classify_badge(*apply_positive_reviews(count, pct, nxt.reviews_needed))
            assert reached is BadgeTier.VERY_HIGHLY_RECOMMENDED, (count, pct, nxt)

            short = classify_badge(*apply_positive_reviews(count, pct, nxt.reviews_needed - 1))
            assert short is not BadgeTier.VERY_HIGHLY_RECOMMENDED, (count, pct, nxt)

    def test_stored_highly_with_no_reviews(self):
        nxt = calculate_next_tier("highly_recommended", 0, 100)
        assert nxt.reviews_needed == 3

    @pytest.mark.parametrize("count", [3, 4, 7, 10, 19, 20, 33, 60])
    def test_round_trip(self, count):
        for pct in range(0, 101):
            tier = classify_badge(count, pct)
            nxt = calculate_next_tier(tier, count, pct)
            if nxt is None:
                assert tier is BadgeTier.VERY_HIGHLY_RECOMMENDED
                continue

            reached = classify_badge(*apply_positive_reviews(count, pct, nxt.reviews_needed))
            assert tier_rank(reached) >= tier_rank(nxt.tier), (count, pct, nxt)

            if nxt.reviews_needed > 0:
                short = classify_badge(
                    *apply_positive_reviews(count, pct, nxt.reviews_needed - 1)
                )
                assert tier_rank(short) < tier_rank(nxt.tier), (count, pct, nxt)


# ---------------------------------------------------------------------------
# Ranking helpers
# ---------------------------------------------------------------------------
class TestRanking:
    def test_tier_rank(self):
        assert tier_rank(None) == 0
        assert tier_rank("recommended") == 1
        assert tier_rank(BadgeTier.HIGHLY_RECOMMENDED) == 2
        assert tier_rank("very_highly_recommended") == 3
        assert tier_rank("bogus") == 0

    def test_is_upgrade(self):
        assert is_upgrade(None, "recommended")
        assert is_upgrade("recommended", "very_highly_recommended")
        assert not is_upgrade("highly_recommended", "recommended")
        assert not is_upgrade("recommended", "recommended")

    def test_coerce_tier(self):
        assert coerce_tier("highly_recommended") is BadgeTier.HIGHLY_RECOMMENDED
        assert coerce_tier(BadgeTier.RECOMMENDED) is BadgeTier.RECOMMENDED
        assert coerce_tier(None) is None
        assert coerce_tier("platinum") is None
