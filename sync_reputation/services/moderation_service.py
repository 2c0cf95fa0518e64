"""
sync_reputation.services.moderation_service — Review Submission & Moderation
=============================================================================

Every moderation write follows the pattern:
  1. Begin transaction
  2. Load the review (404 if missing)
  3. Apply the status change
  4. Append to review_moderation_log
  5. Recompute the business's reputation if approval status changed
  6. Commit

Authors may also edit or soft-delete their own review; either recomputes
the badge when it changes what an approved review contributes.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sync_reputation.constants import REJECTION_REASON_MAX_LENGTH
from sync_reputation.database.models import (
    Business,
    BusinessReview,
    ModerationAction,
    ModerationStatus,
    ReviewModerationLog,
)
from sync_reputation.engine.reviews import validate_review_text
from sync_reputation.exceptions import (
    BusinessNotFound,
    DuplicateReview,
    ModerationError,
    ReviewDeleted,
    ReviewNotFound,
    ReviewPermissionError,
    ReviewValidationError,
)
from sync_reputation.services.reputation_service import recompute_reputation

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from sync_reputation.config import ReputationConfig

logger = logging.getLogger(__name__)


def _review_dict(review: BusinessReview) -> dict:
    return {
        "id": review.id,
        "business_id": review.business_id,
        "user_id": review.user_id,
        "recommendation": review.recommendation,
        "review_text": review.review_text,
        "moderation_status": review.moderation_status,
        "moderated_by": review.moderated_by,
        "moderated_at": review.moderated_at.isoformat() if review.moderated_at else None,
        "rejection_reason": review.rejection_reason,
        "created_at": review.created_at.isoformat() if review.created_at else None,
        "updated_at": review.updated_at.isoformat() if review.updated_at else None,
        "deleted_at": review.deleted_at.isoformat() if review.deleted_at else None,
    }


def _clean_text(review_text: str | None) -> str | None:
    return review_text.strip() if review_text and review_text.strip() else None


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------
def submit_review(
    engine: Engine,
    cfg: ReputationConfig,
    *,
    business_id: int,
    user_id: str,
    recommendation: bool,
    review_text: str | None = None,
) -> dict:
    """Store a new review.

    With ``require_moderation`` enabled the review waits in the pending
    queue; otherwise it is approved on the spot and the badge recomputed.

    Raises
    ------
    ReviewValidationError
        Review text breaks the word limits.
    BusinessNotFound
        Unknown *business_id*.
    DuplicateReview
        *user_id* already reviewed this business.
    """
    check = validate_review_text(review_text, cfg.review_min_words, cfg.review_max_words)
    if not check.valid:
        logger.warning("Rejected review text from %s: %s", user_id, check.error)
        raise ReviewValidationError(check.error)

    text = _clean_text(review_text)

    with Session(engine, expire_on_commit=False) as session:
        if session.get(Business, business_id) is None:
            raise BusinessNotFound(business_id)

        existing = session.scalar(
            select(BusinessReview.id).where(
                BusinessReview.business_id == business_id,
                BusinessReview.user_id == user_id,
            )
        )
        if existing is not None:
            raise DuplicateReview(
                f"User {user_id} has already reviewed business {business_id}"
            )

        review = BusinessReview(
            business_id=business_id,
            user_id=user_id,
            recommendation=recommendation,
            review_text=text,
        )
        if not cfg.require_moderation:
            review.moderation_status = ModerationStatus.APPROVED.value
            review.moderated_at = datetime.now(UTC)

        # The unique constraint still guards concurrent submissions.
        try:
            with session.begin_nested():   # SAVEPOINT
                session.add(review)
                session.flush()
        except IntegrityError:
            raise DuplicateReview(
                f"User {user_id} has already reviewed business {business_id}"
            ) from None

        if review.moderation_status == ModerationStatus.APPROVED.value:
            recompute_reputation(session, business_id)

        session.commit()
        session.refresh(review)
        logger.info(
            "Review %d submitted for business %d (%s, %s)",
            review.id, business_id,
            "recommend" if recommendation else "not recommend",
            review.moderation_status,
        )
        return _review_dict(review)


# ---------------------------------------------------------------------------
# Author edits & soft delete
# ---------------------------------------------------------------------------
UNCHANGED: Any = object()
"""Sentinel for :func:`update_review` fields the author did not send."""


def _load_own_review(
    session: Session, business_id: int, review_id: int, user_id: str, verb: str,
) -> BusinessReview:
    review = session.get(BusinessReview, review_id)
    if review is None or review.business_id != business_id:
        raise ReviewNotFound(review_id)
    if review.user_id != user_id:
        logger.warning(
            "User %s tried to %s review %d by %s", user_id, verb, review_id, review.user_id,
        )
        raise ReviewPermissionError(f"You can only {verb} your own reviews")
    return review


def update_review(
    engine: Engine,
    cfg: ReputationConfig,
    *,
    business_id: int,
    review_id: int,
    user_id: str,
    recommendation: bool | None = None,
    review_text: str | None = UNCHANGED,
) -> dict:
    """Let the author change their recommendation and/or text.

    The moderation status is kept.  Flipping the recommendation of an
    approved review recomputes the business's badge.

    Raises
    ------
    ReviewValidationError
        New text breaks the word limits.
    ReviewNotFound
        Unknown review, or the review belongs to another business.
    ReviewPermissionError
        *user_id* is not the author.
    ReviewDeleted
        The review was soft-deleted.
    """
    if review_text is not UNCHANGED:
        check = validate_review_text(review_text, cfg.review_min_words, cfg.review_max_words)
        if not check.valid:
            logger.warning("Rejected review edit from %s: %s", user_id, check.error)
            raise ReviewValidationError(check.error)

    with Session(engine, expire_on_commit=False) as session:
        review = _load_own_review(session, business_id, review_id, user_id, "edit")
        if review.deleted_at is not None:
            raise ReviewDeleted("Cannot edit a deleted review")

        flipped = recommendation is not None and recommendation != review.recommendation
        if recommendation is not None:
            review.recommendation = recommendation
        if review_text is not UNCHANGED:
            review.review_text = _clean_text(review_text)

        if session.is_modified(review):
            review.updated_at = datetime.now(UTC)
        if flipped and review.moderation_status == ModerationStatus.APPROVED.value:
            recompute_reputation(session, business_id)

        session.commit()
        logger.info(
            "Review %d edited by %s (recommendation flipped: %s)", review_id, user_id, flipped,
        )
        return _review_dict(review)


def delete_review(engine: Engine, *, business_id: int, review_id: int, user_id: str) -> dict:
    """Soft-delete the author's own review.

    The row stays for audit; an approved review stops counting toward the
    badge immediately.

    Raises
    ------
    ReviewNotFound
        Unknown review, or the review belongs to another business.
    ReviewPermissionError
        *user_id* is not the author.
    ReviewDeleted
        The review is already deleted.
    """
    with Session(engine, expire_on_commit=False) as session:
        review = _load_own_review(session, business_id, review_id, user_id, "delete")
        if review.deleted_at is not None:
            raise ReviewDeleted("This review has already been deleted")

        review.deleted_at = datetime.now(UTC)
        review.deleted_by = user_id
        if review.moderation_status == ModerationStatus.APPROVED.value:
            recompute_reputation(session, business_id)

        session.commit()
        logger.info("Review %d soft-deleted by %s", review_id, user_id)
        return _review_dict(review)


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------
def _moderate(
    engine: Engine,
    review_id: int,
    admin_id: str,
    action: ModerationAction,
    reason: str | None = None,
) -> dict:
    new_status = (
        ModerationStatus.APPROVED if action is ModerationAction.APPROVE
        else ModerationStatus.REJECTED
    )

    with Session(engine, expire_on_commit=False) as session:
        review = session.get(BusinessReview, review_id)
        if review is None:
            raise ReviewNotFound(review_id)
        if review.deleted_at is not None:
            raise ModerationError("Review has been deleted by its author")

        was_approved = review.moderation_status == ModerationStatus.APPROVED.value
        review.moderation_status = new_status.value
        review.moderated_by = admin_id
        review.moderated_at = datetime.now(UTC)
        review.rejection_reason = reason if action is ModerationAction.REJECT else None

        session.add(ReviewModerationLog(
            review_id=review_id,
            action=action.value,
            performed_by=admin_id,
            reason=reason,
        ))

        if was_approved != (new_status is ModerationStatus.APPROVED):
            recompute_reputation(session, review.business_id)

        session.commit()
        logger.info("Review %d %sd by %s", review_id, action.value, admin_id)
        return _review_dict(review)


def approve_review(engine: Engine, review_id: int, admin_id: str) -> dict:
    """Approve a review so it counts toward the business's badge."""
    return _moderate(engine, review_id, admin_id, ModerationAction.APPROVE)


def reject_review(engine: Engine, review_id: int, admin_id: str, reason: str) -> dict:
    """Reject a review.  A non-blank reason is required.

    Rejecting a previously approved review removes it from the badge math.
    """
    reason = (reason or "").strip()
    if not reason:
        raise ModerationError("Rejection reason is required")
    if len(reason) > REJECTION_REASON_MAX_LENGTH:
        raise ModerationError(
            f"Rejection reason must be {REJECTION_REASON_MAX_LENGTH} characters or less"
        )
    return _moderate(engine, review_id, admin_id, ModerationAction.REJECT, reason)


# ---------------------------------------------------------------------------
# Pending queue
# ---------------------------------------------------------------------------
def get_pending_reviews(engine: Engine, limit: int = 50) -> list[dict]:
    """Oldest pending reviews first."""
    with Session(engine) as session:
        rows = session.scalars(
            select(BusinessReview)
            .where(BusinessReview.moderation_status == ModerationStatus.PENDING.value)
            .where(BusinessReview.deleted_at.is_(None))
            .order_by(BusinessReview.created_at, BusinessReview.id)
            .limit(limit)
        ).all()
        return [_review_dict(r) for r in rows]


def get_pending_count(engine: Engine) -> int:
    with Session(engine) as session:
        return session.scalar(
            select(func.count())
            .select_from(BusinessReview)
            .where(BusinessReview.moderation_status == ModerationStatus.PENDING.value)
            .where(BusinessReview.deleted_at.is_(None))
        ) or 0
