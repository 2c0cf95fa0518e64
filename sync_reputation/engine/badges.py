"""
sync_reputation.engine.badges — Trust Badge Tiers
===================================================

Classifies a business into a recommendation badge tier from its approved
review count and positive-review percentage, and projects how many more
positive reviews are needed to reach the next tier.

This module is pure calculation with no database or HTTP I/O.  Every
function is total: out-of-range inputs are clamped instead of rejected.

Projection assumption
---------------------
``reviews_needed`` answers "how many more thumbs up in a row?".  It is a
best-case figure: it assumes every new review between now and the target
is positive.  Any negative review in the meantime pushes the target out.
"""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tier table
# ---------------------------------------------------------------------------
class BadgeTier(enum.StrEnum):
    """Ordered trust badge levels.  "No badge" is represented by ``None``."""
    RECOMMENDED = "recommended"
    HIGHLY_RECOMMENDED = "highly_recommended"
    VERY_HIGHLY_RECOMMENDED = "very_highly_recommended"


@dataclass(frozen=True, slots=True)
class TierDefinition:
    """Static thresholds for one tier."""

    tier: BadgeTier
    label: str
    percentage: int     # minimum positive-review percentage
    min_reviews: int    # minimum approved review count

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "label": self.label,
            "percentage": self.percentage,
            "min_reviews": self.min_reviews,
        }


MIN_REVIEW_COUNT = 3

BADGE_CONFIG: Mapping[BadgeTier, TierDefinition] = MappingProxyType({
    BadgeTier.RECOMMENDED: TierDefinition(
        BadgeTier.RECOMMENDED, "Recommended", 75, MIN_REVIEW_COUNT,
    ),
    BadgeTier.HIGHLY_RECOMMENDED: TierDefinition(
        BadgeTier.HIGHLY_RECOMMENDED, "Highly Recommended", 90, MIN_REVIEW_COUNT,
    ),
    BadgeTier.VERY_HIGHLY_RECOMMENDED: TierDefinition(
        BadgeTier.VERY_HIGHLY_RECOMMENDED, "Very Highly Recommended", 95, MIN_REVIEW_COUNT,
    ),
})

# Lowest → highest.  Index + 1 is the tier's rank (0 = no badge).
TIER_ORDER: tuple[BadgeTier, ...] = (
    BadgeTier.RECOMMENDED,
    BadgeTier.HIGHLY_RECOMMENDED,
    BadgeTier.VERY_HIGHLY_RECOMMENDED,
)


# ---------------------------------------------------------------------------
# NextTier — output of the projector
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class NextTier:
    """The next badge to aim for and the positive reviews it takes."""

    tier: BadgeTier
    name: str
    percentage: int
    reviews_needed: int

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "name": self.name,
            "percentage": self.percentage,
            "reviewsNeeded": self.reviews_needed,
        }


# ---------------------------------------------------------------------------
# Input normalization
# ---------------------------------------------------------------------------
def _clamp_count(review_count) -> int:
    try:
        count = int(review_count)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)


def _clamp_percentage(positive_percentage) -> float:
    try:
        pct = float(positive_percentage)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(pct):
        return 0.0
    return min(max(pct, 0.0), 100.0)


def coerce_tier(value: BadgeTier | str | None) -> BadgeTier | None:
    """Turn a stored tier string into a :class:`BadgeTier`.

    Unknown strings map to ``None`` (treated as "no badge").
    """
    if value is None or isinstance(value, BadgeTier):
        return value
    try:
        return BadgeTier(value)
    except ValueError:
        logger.warning("Unknown badge tier %r — treating as no badge", value)
        return None


def tier_rank(tier: BadgeTier | str | None) -> int:
    """0 for no badge, 1..3 for the ordered tiers."""
    tier = coerce_tier(tier)
    if tier is None:
        return 0
    return TIER_ORDER.index(tier) + 1


def is_upgrade(previous: BadgeTier | str | None, current: BadgeTier | str | None) -> bool:
    return tier_rank(current) > tier_rank(previous)


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------
def classify_badge(review_count, positive_percentage) -> BadgeTier | None:
    """Return the highest tier whose thresholds are met, or ``None``.

    Businesses with fewer than three approved reviews never get a badge,
    whatever their percentage.
    """
    count = _clamp_count(review_count)
    pct = _clamp_percentage(positive_percentage)

    for tier in reversed(TIER_ORDER):
        definition = BADGE_CONFIG[tier]
        if count >= definition.min_reviews and pct >= definition.percentage:
            return tier
    return None


# ---------------------------------------------------------------------------
# Reviews-needed arithmetic
# ---------------------------------------------------------------------------
def positive_count(review_count, positive_percentage) -> int:
    """Re-derive the positive review count from a (rounded) percentage.

    Rounds half up.  Because the stored percentage was itself rounded, the
    result can be off by one for counts where the percentage is ambiguous.
    """
    count = _clamp_count(review_count)
    pct = _clamp_percentage(positive_percentage)
    exact = Fraction(count) * Fraction(pct) / 100
    return math.floor(exact + Fraction(1, 2))


def reviews_needed(review_count, positive_percentage, target_percentage) -> int | None:
    """Consecutive positive reviews needed to reach *target_percentage*.

    Solves ``(P + X) / (N + X) >= T`` for the smallest integer ``X``::

        X = ceil((T * N - P) / (1 - T))

    Returns ``None`` when the target is 100% or more (unreachable while any
    negative review exists), and never less than 0.
    """
    target = Fraction(_clamp_percentage(target_percentage)) / 100
    if target >= 1:
        return None

    count = _clamp_count(review_count)
    positives = positive_count(count, positive_percentage)
    needed = math.ceil((target * count - positives) / (1 - target))
    return max(needed, 0)


def apply_positive_reviews(review_count, positive_percentage, extra: int) -> tuple[int, float]:
    """Return ``(count, percentage)`` after *extra* positive reviews arrive."""
    count = _clamp_count(review_count)
    extra = _clamp_count(extra)
    new_count = count + extra
    if new_count == 0:
        return 0, 0.0
    positives = positive_count(count, positive_percentage) + extra
    return new_count, positives * 100 / new_count


# ---------------------------------------------------------------------------
# Next-tier projector
# ---------------------------------------------------------------------------
def _project(tier: BadgeTier, review_count: int, positive_percentage: float) -> NextTier | None:
    definition = BADGE_CONFIG[tier]
    needed = reviews_needed(review_count, positive_percentage, definition.percentage)
    if needed is None:
        return None  # unreachable threshold
    # A stored tier can outlive its sample (e.g. after deletions); the
    # target still needs min_reviews in total.
    needed = max(needed, definition.min_reviews - review_count)
    return NextTier(
        tier=tier,
        name=definition.label,
        percentage=definition.percentage,
        reviews_needed=needed,
    )


def calculate_next_tier(
    current_tier: BadgeTier | str | None,
    review_count,
    positive_percentage,
) -> NextTier | None:
    """Project the next badge tier for a business.

    Parameters
    ----------
    current_tier : The tier currently stored for the business (or ``None``).
    review_count : Lifetime approved review count.
    positive_percentage : Percentage of approved reviews that recommend.

    Returns
    -------
    The next tier with its threshold and the positive reviews still needed,
    or ``None`` when the business already holds the top tier.
    """
    tier = coerce_tier(current_tier)
    count = _clamp_count(review_count)

    if tier is BadgeTier.VERY_HIGHLY_RECOMMENDED:
        return None
    if tier is BadgeTier.HIGHLY_RECOMMENDED:
        return _project(
            BadgeTier.VERY_HIGHLY_RECOMMENDED, count, _clamp_percentage(positive_percentage),
        )

    recommended = BADGE_CONFIG[BadgeTier.RECOMMENDED]

    # Sample too small: the percentage is not meaningful yet.
    if count < recommended.min_reviews:
        return NextTier(
            tier=BadgeTier.RECOMMENDED,
            name=recommended.label,
            percentage=recommended.percentage,
            reviews_needed=recommended.min_reviews - count,
        )

    pct = _clamp_percentage(positive_percentage)
    if pct < recommended.percentage:
        return _project(BadgeTier.RECOMMENDED, count, pct)
    return _project(BadgeTier.HIGHLY_RECOMMENDED, count, pct)
