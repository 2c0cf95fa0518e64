"""
sync_reputation.constants — Shared Constants
=============================================

Presentation constants for badges and the default review text limits.
Import from here instead of duplicating in services and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Badge presentation (used by API payloads for storefront / search cards)
# ---------------------------------------------------------------------------
BADGE_EMOJI: dict[str, str] = {
    "recommended": "\U0001f44d",              # 👍
    "highly_recommended": "\u2b50",           # ⭐
    "very_highly_recommended": "\U0001f3c6",   # 🏆
}

BADGE_COLORS_HEX: dict[str, str] = {
    "recommended": "#2563eb",
    "highly_recommended": "#7c3aed",
    "very_highly_recommended": "#ca8a04",
}

# ---------------------------------------------------------------------------
# Review text rules (defaults; overridable in config.yaml)
# ---------------------------------------------------------------------------
REVIEW_TEXT_MIN_WORDS = 1
REVIEW_TEXT_WORD_LIMIT = 150
REJECTION_REASON_MAX_LENGTH = 500
