"""
sync_reputation.services.reputation_service — Badge Recompute & Read Path
==========================================================================

Shared service module callable by the API, moderation workflow and the
maintenance CLI.

Write path: approved reviews → :func:`summarize_reviews` →
:func:`classify_badge` → cached columns on ``businesses`` (+ a
``badge_history`` row whenever the tier changes).

Read path: stored reputation record → :func:`calculate_next_tier` →
:class:`BadgeStatus` for the dashboard card.

Tiers are not sticky: if the percentage drops below a threshold the badge
is downgraded on the next recompute.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sync_reputation.constants import BADGE_COLORS_HEX, BADGE_EMOJI
from sync_reputation.database.models import (
    BadgeAcknowledgement,
    BadgeHistory,
    Business,
    BusinessReview,
    ModerationStatus,
)
from sync_reputation.engine.badges import (
    BADGE_CONFIG,
    BadgeTier,
    NextTier,
    calculate_next_tier,
    classify_badge,
    coerce_tier,
    is_upgrade,
    tier_rank,
)
from sync_reputation.engine.reviews import ReviewSummary, summarize_reviews
from sync_reputation.exceptions import BusinessNotFound

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ReputationSnapshot:
    """Outcome of one recompute."""

    business_id: int
    summary: ReviewSummary
    old_tier: BadgeTier | None
    new_tier: BadgeTier | None

    @property
    def changed(self) -> bool:
        return self.old_tier != self.new_tier


@dataclass(frozen=True, slots=True)
class BadgeStatus:
    """Everything the badge card needs to render."""

    business_id: int | None
    tier: BadgeTier | None
    percentage: float
    review_count: int
    next_tier: NextTier | None

    def to_dict(self) -> dict:
        tier = self.tier.value if self.tier else None
        return {
            "business_id": self.business_id,
            "tier": tier,
            "label": BADGE_CONFIG[self.tier].label if self.tier else None,
            "emoji": BADGE_EMOJI.get(tier) if tier else None,
            "color": BADGE_COLORS_HEX.get(tier) if tier else None,
            "percentage": self.percentage,
            "reviewCount": self.review_count,
            "nextTier": self.next_tier.to_dict() if self.next_tier else None,
        }


@dataclass(frozen=True, slots=True)
class BadgeAcknowledgementResult:
    tier: BadgeTier | None
    previous_tier: BadgeTier | None
    celebrate: bool

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value if self.tier else None,
            "previous_tier": self.previous_tier.value if self.previous_tier else None,
            "celebrate": self.celebrate,
        }


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------
def _approved_recommendations(session: Session, business_id: int) -> list[bool]:
    return list(session.scalars(
        select(BusinessReview.recommendation).where(
            BusinessReview.business_id == business_id,
            BusinessReview.moderation_status == ModerationStatus.APPROVED.value,
            BusinessReview.deleted_at.is_(None),
        )
    ).all())


def recompute_reputation(session: Session, business_id: int) -> ReputationSnapshot:
    """Recompute and store the reputation fields for one business.

    Runs inside the caller's transaction; the caller commits.

    Raises
    ------
    BusinessNotFound
        If *business_id* doesn't exist.
    """
    business = session.get(Business, business_id)
    if business is None:
        raise BusinessNotFound(business_id)

    summary = summarize_reviews(_approved_recommendations(session, business_id))
    old_tier = coerce_tier(business.recommendation_badge)
    new_tier = classify_badge(summary.total, summary.percentage)

    business.approved_review_count = summary.total
    business.recommendation_percentage = float(summary.percentage)

    if old_tier != new_tier:
        now = datetime.now(UTC)
        business.recommendation_badge = new_tier.value if new_tier else None
        business.badge_updated_at = now
        session.add(BadgeHistory(
            business_id=business_id,
            old_tier=old_tier.value if old_tier else None,
            new_tier=new_tier.value if new_tier else None,
            review_count=summary.total,
            percentage=float(summary.percentage),
            changed_at=now,
        ))
        logger.info(
            "Badge %s for business %d: %s → %s (%d reviews, %d%%)",
            "upgrade" if is_upgrade(old_tier, new_tier) else "downgrade",
            business_id, old_tier, new_tier, summary.total, summary.percentage,
        )

    session.flush()
    return ReputationSnapshot(
        business_id=business_id,
        summary=summary,
        old_tier=old_tier,
        new_tier=new_tier,
    )


def recompute_all(engine: Engine) -> int:
    """Recompute every business.  Returns the number of badges that changed."""
    changed = 0
    with Session(engine) as session:
        business_ids = session.scalars(select(Business.id).order_by(Business.id)).all()
        for business_id in business_ids:
            if recompute_reputation(session, business_id).changed:
                changed += 1
        session.commit()

    logger.info(
        "Recomputed reputation for %d businesses (%d badge changes)",
        len(business_ids), changed,
    )
    return changed


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------
def build_badge_status(
    business_id: int | None,
    stored_tier: BadgeTier | str | None,
    review_count: int,
    percentage: float,
) -> BadgeStatus:
    """Combine a stored reputation record with its next-tier projection."""
    tier = coerce_tier(stored_tier)
    return BadgeStatus(
        business_id=business_id,
        tier=tier,
        percentage=percentage,
        review_count=review_count,
        next_tier=calculate_next_tier(tier, review_count, percentage),
    )


def get_business_badge(engine: Engine, business_id: int) -> BadgeStatus:
    """Badge status for one business, read from its cached reputation record.

    Raises
    ------
    BusinessNotFound
        If *business_id* doesn't exist.
    """
    with Session(engine) as session:
        business = session.get(Business, business_id)
        if business is None:
            raise BusinessNotFound(business_id)
        return build_badge_status(
            business.id,
            business.recommendation_badge,
            business.approved_review_count,
            business.recommendation_percentage,
        )


def preview_badge(review_count: int, percentage: float) -> BadgeStatus:
    """What-if calculator: classify hypothetical numbers without persisting."""
    tier = classify_badge(review_count, percentage)
    return build_badge_status(None, tier, review_count, percentage)


def get_badge_history(engine: Engine, business_id: int, limit: int = 50) -> list[dict]:
    """Most recent tier transitions first."""
    with Session(engine) as session:
        if session.get(Business, business_id) is None:
            raise BusinessNotFound(business_id)
        rows = session.scalars(
            select(BadgeHistory)
            .where(BadgeHistory.business_id == business_id)
            .order_by(BadgeHistory.changed_at.desc(), BadgeHistory.id.desc())
            .limit(limit)
        ).all()
        return [
            {
                "old_tier": row.old_tier,
                "new_tier": row.new_tier,
                "review_count": row.review_count,
                "percentage": row.percentage,
                "changed_at": row.changed_at.isoformat() if row.changed_at else None,
            }
            for row in rows
        ]


# ---------------------------------------------------------------------------
# Upgrade acknowledgement
# ---------------------------------------------------------------------------
def acknowledge_badge(
    engine: Engine, business_id: int, viewer_id: str,
) -> BadgeAcknowledgementResult:
    """Record that *viewer_id* has seen the current badge.

    ``celebrate`` is true only when the viewer saw a lower tier before.  The
    first view never celebrates, and a viewer who saw "no badge" is
    remembered so a later first badge does.
    """
    with Session(engine) as session:
        business = session.get(Business, business_id)
        if business is None:
            raise BusinessNotFound(business_id)
        current = coerce_tier(business.recommendation_badge)

        stored = current.value if current else None
        previous = None
        celebrate = False

        ack = session.get(BadgeAcknowledgement, (business_id, viewer_id))
        if ack is None:
            # A concurrent first view may insert the same key first.
            try:
                with session.begin_nested():   # SAVEPOINT
                    session.add(BadgeAcknowledgement(
                        business_id=business_id, viewer_id=viewer_id, tier=stored,
                    ))
            except IntegrityError:
                ack = session.get(
                    BadgeAcknowledgement, (business_id, viewer_id), populate_existing=True,
                )
                if ack is None:
                    raise

        if ack is not None:
            previous = coerce_tier(ack.tier)
            celebrate = tier_rank(current) > tier_rank(previous)
            ack.tier = stored
            ack.seen_at = datetime.now(UTC)

        session.commit()

    if celebrate:
        logger.info(
            "Badge upgrade seen by %s for business %d: %s → %s",
            viewer_id, business_id, previous, current,
        )
    return BadgeAcknowledgementResult(
        tier=current, previous_tier=previous, celebrate=celebrate,
    )
