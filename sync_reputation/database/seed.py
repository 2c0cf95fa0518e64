"""
sync_reputation.database.seed — Demo Data Seeder
=================================================

A handful of storefronts with approved reviews spanning every badge tier,
so the badge card is immediately populated in a local environment.

Idempotent: businesses that already exist (by name) are left alone.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from sync_reputation.database.models import Business, BusinessReview, ModerationStatus
from sync_reputation.services.reputation_service import recompute_reputation

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Demo catalogue: name → (business_type, positive reviews, negative reviews)
# ---------------------------------------------------------------------------
DEMO_BUSINESSES: dict[str, tuple[str, int, int]] = {
    "Corner Cafe": ("cafe", 2, 0),              # too few reviews
    "Lakeside Bakery": ("bakery", 8, 2),        # 80% → recommended
    "Northside Barbers": ("salon", 18, 2),      # 90% → highly recommended
    "Harbor Fish House": ("restaurant", 48, 2), # 96% → very highly recommended
    "Quick Fix Phones": ("electronics", 5, 5),  # 50% → no badge
}


def seed_demo_data(engine: Engine) -> int:
    """Insert demo businesses and approved reviews.  Returns rows created."""
    created = 0
    with Session(engine) as session:
        for name, (business_type, positive, negative) in DEMO_BUSINESSES.items():
            exists = session.scalar(select(Business.id).where(Business.name == name))
            if exists is not None:
                continue

            business = Business(name=name, business_type=business_type)
            session.add(business)
            session.flush()

            now = datetime.now(UTC)
            for i in range(positive + negative):
                session.add(BusinessReview(
                    business_id=business.id,
                    user_id=f"demo-user-{i + 1}",
                    recommendation=i < positive,
                    moderation_status=ModerationStatus.APPROVED.value,
                    moderated_by="seed",
                    moderated_at=now,
                ))
            session.flush()
            recompute_reputation(session, business.id)
            created += 1

        session.commit()

    logger.info("Seeded %d demo businesses", created)
    return created
