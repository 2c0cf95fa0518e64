"""
sync_reputation.database.models — SQLAlchemy 2.0 Data Models
=============================================================

Tables:
- businesses              — Storefronts plus their cached reputation fields
- business_reviews        — Binary recommend / don't-recommend reviews
- review_moderation_log   — Append-only record of approve / reject decisions
- badge_history           — Append-only badge tier transitions
- badge_acknowledgements  — Last badge tier each viewer has seen (upgrade banners)

User identities come from the external auth provider, so user columns are
plain string IDs rather than foreign keys.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all reputation ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ModerationStatus(enum.StrEnum):
    """Lifecycle of a review.  Only APPROVED reviews count toward reputation."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ModerationAction(enum.StrEnum):
    APPROVE = "approve"
    REJECT = "reject"


# ---------------------------------------------------------------------------
# Businesses — one row per storefront
# ---------------------------------------------------------------------------
class Business(Base):
    __tablename__ = "businesses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    business_type: Mapped[str | None] = mapped_column(String(100), default=None)
    owner_id: Mapped[str | None] = mapped_column(String(64), default=None)

    # Reputation cache, rewritten by reputation_service.recompute_reputation
    approved_review_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    recommendation_percentage: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0, server_default="0"
    )
    recommendation_badge: Mapped[str | None] = mapped_column(String(32), default=None)
    badge_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    reviews: Mapped[list[BusinessReview]] = relationship(
        back_populates="business", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_businesses_review_count", "approved_review_count"),
        Index("ix_businesses_badge", "recommendation_badge"),
    )

    def __repr__(self) -> str:
        return f"<Business id={self.id} name={self.name!r} badge={self.recommendation_badge}>"


# ---------------------------------------------------------------------------
# BusinessReview — one review per (business, user)
# ---------------------------------------------------------------------------
class BusinessReview(Base):
    __tablename__ = "business_reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    recommendation: Mapped[bool] = mapped_column(Boolean, nullable=False)
    review_text: Mapped[str | None] = mapped_column(Text, default=None)
    moderation_status: Mapped[str] = mapped_column(
        String(16), nullable=False,
        default=ModerationStatus.PENDING.value,
        server_default=ModerationStatus.PENDING.value,
    )
    moderated_by: Mapped[str | None] = mapped_column(String(64), default=None)
    moderated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, default=None)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    # Soft delete by the author; deleted reviews never count toward reputation
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    deleted_by: Mapped[str | None] = mapped_column(String(64), default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    business: Mapped[Business] = relationship(back_populates="reviews")

    __table_args__ = (
        UniqueConstraint("business_id", "user_id", name="uq_business_reviews_business_user"),
        Index("ix_business_reviews_status", "moderation_status", "created_at"),
        Index("ix_business_reviews_business_status", "business_id", "moderation_status"),
    )

    def __repr__(self) -> str:
        return (
            f"<BusinessReview id={self.id} business={self.business_id} "
            f"recommend={self.recommendation} status={self.moderation_status}>"
        )


# ---------------------------------------------------------------------------
# ReviewModerationLog — append-only audit of moderation decisions
# ---------------------------------------------------------------------------
class ReviewModerationLog(Base):
    __tablename__ = "review_moderation_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    review_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("business_reviews.id", ondelete="CASCADE"), nullable=False
    )
    action: Mapped[str] = mapped_column(String(16), nullable=False)
    performed_by: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_moderation_log_review", "review_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ReviewModerationLog review={self.review_id} action={self.action}>"


# ---------------------------------------------------------------------------
# BadgeHistory — append-only tier transitions (upgrades and downgrades)
# ---------------------------------------------------------------------------
class BadgeHistory(Base):
    __tablename__ = "badge_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False
    )
    old_tier: Mapped[str | None] = mapped_column(String(32), default=None)
    new_tier: Mapped[str | None] = mapped_column(String(32), default=None)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False)
    percentage: Mapped[float] = mapped_column(Float, nullable=False)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_badge_history_business_time", "business_id", "changed_at"),
    )

    def __repr__(self) -> str:
        return f"<BadgeHistory business={self.business_id} {self.old_tier}→{self.new_tier}>"


# ---------------------------------------------------------------------------
# BadgeAcknowledgement — last tier a viewer saw for a business
# ---------------------------------------------------------------------------
class BadgeAcknowledgement(Base):
    __tablename__ = "badge_acknowledgements"

    business_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True
    )
    viewer_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    tier: Mapped[str | None] = mapped_column(String(32), default=None)
    seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<BadgeAcknowledgement business={self.business_id} viewer={self.viewer_id}>"
