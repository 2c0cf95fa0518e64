"""
sync_reputation.exceptions — Domain errors raised by the service layer.

The badge engine itself never raises; these cover lookups and review
workflow rules.  API routes translate them into HTTP status codes.
"""

from __future__ import annotations


class ReputationError(Exception):
    """Base class for all reputation service errors."""


class BusinessNotFound(ReputationError):
    def __init__(self, business_id: int) -> None:
        super().__init__(f"Business {business_id} not found")
        self.business_id = business_id


class ReviewNotFound(ReputationError):
    def __init__(self, review_id: int) -> None:
        super().__init__(f"Review {review_id} not found")
        self.review_id = review_id


class ReviewValidationError(ReputationError):
    """Review text failed the word-count rules."""


class DuplicateReview(ReputationError):
    """The user already reviewed this business."""


class ModerationError(ReputationError):
    """Invalid moderation request (e.g. rejecting without a reason)."""


class ReviewPermissionError(ReputationError):
    """The user tried to change a review they did not write."""


class ReviewDeleted(ReputationError):
    """The review was soft-deleted and can no longer change."""
