"""
SynC Reputation — Trust Badges for Local Businesses
=====================================================
Turns moderated "recommend / don't recommend" reviews into the trust badge
a business shows on its storefront, and tells owners how many more thumbs
up they need to reach the next tier.

Package layout::

    sync_reputation/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Badge presentation + review text limits
    ├── exceptions.py      # Domain error hierarchy
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   ├── models.py      # Businesses, reviews, moderation log, badge history
    │   └── seed.py        # Demo data for local development
    ├── engine/
    │   ├── badges.py      # Tier table, classifier, next-tier projector
    │   └── reviews.py     # Review text rules + recommendation summary
    ├── services/
    │   ├── reputation_service.py  # Recompute + read badge status
    │   └── moderation_service.py  # Submit / approve / reject reviews
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Engine, config, JWT guards
        └── routes/        # Public badge endpoints + admin moderation
"""

__version__ = "0.1.0"
