"""
sync_reputation.engine.reviews — Review Text Rules & Recommendation Summary
=============================================================================

Pure helpers for the binary review system: word counting for the optional
review text, and the count / percentage reduction that feeds the badge
classifier.  No database I/O.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sync_reputation.constants import REVIEW_TEXT_MIN_WORDS, REVIEW_TEXT_WORD_LIMIT


@dataclass(frozen=True, slots=True)
class ReviewTextCheck:
    valid: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ReviewSummary:
    """Approved-review totals for one business."""

    total: int = 0
    positive: int = 0
    negative: int = 0
    percentage: int = 0  # positive share, rounded half up to a whole percent


def count_words(text: str | None) -> int:
    """Count whitespace-separated words; ``None`` or blank text is 0."""
    if not text or not text.strip():
        return 0
    return len(text.split())


def validate_review_text(
    text: str | None,
    min_words: int = REVIEW_TEXT_MIN_WORDS,
    max_words: int = REVIEW_TEXT_WORD_LIMIT,
) -> ReviewTextCheck:
    """Check optional review text against the word limits.

    Blank text is valid: a thumbs up / down alone is a complete review.
    """
    if not text or not text.strip():
        return ReviewTextCheck(valid=True)

    words = count_words(text)
    if words < min_words:
        plural = "s" if min_words > 1 else ""
        return ReviewTextCheck(
            valid=False,
            error=f"Review text must be at least {min_words} word{plural}",
        )
    if words > max_words:
        return ReviewTextCheck(
            valid=False,
            error=f"Review text must be {max_words} words or less",
        )
    return ReviewTextCheck(valid=True)


def summarize_reviews(recommendations: Iterable[bool]) -> ReviewSummary:
    """Reduce approved review verdicts to totals and a rounded percentage."""
    total = 0
    positive = 0
    for recommended in recommendations:
        total += 1
        if recommended:
            positive += 1

    if total == 0:
        return ReviewSummary()

    # Integer round-half-up of positive * 100 / total
    percentage = (positive * 200 + total) // (2 * total)
    return ReviewSummary(
        total=total,
        positive=positive,
        negative=total - positive,
        percentage=percentage,
    )
