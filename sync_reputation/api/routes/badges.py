"""
sync_reputation.api.routes.badges — Badge status endpoints
===========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import Engine

from sync_reputation.api.deps import get_current_user, get_engine
from sync_reputation.constants import BADGE_COLORS_HEX, BADGE_EMOJI
from sync_reputation.database.engine import run_db
from sync_reputation.engine.badges import BADGE_CONFIG, TIER_ORDER
from sync_reputation.exceptions import BusinessNotFound
from sync_reputation.services import reputation_service

router = APIRouter(tags=["badges"])


# ---------------------------------------------------------------------------
# GET /badges/tiers
# ---------------------------------------------------------------------------
@router.get("/badges/tiers")
def list_tiers():
    """The static tier table, lowest tier first."""
    tiers = []
    for tier in TIER_ORDER:
        entry = BADGE_CONFIG[tier].to_dict()
        entry["emoji"] = BADGE_EMOJI[tier.value]
        entry["color"] = BADGE_COLORS_HEX[tier.value]
        tiers.append(entry)
    return {"tiers": tiers}


# ---------------------------------------------------------------------------
# GET /badges/preview
# ---------------------------------------------------------------------------
@router.get("/badges/preview")
def preview_badge(
    review_count: int = Query(..., ge=0),
    percentage: float = Query(..., ge=0, le=100),
):
    """What-if calculator for hypothetical review numbers."""
    return reputation_service.preview_badge(review_count, percentage).to_dict()


# ---------------------------------------------------------------------------
# GET /businesses/{business_id}/badge
# ---------------------------------------------------------------------------
@router.get("/businesses/{business_id}/badge")
async def get_business_badge(business_id: int, engine: Engine = Depends(get_engine)):
    try:
        status = await run_db(reputation_service.get_business_badge, engine, business_id)
    except BusinessNotFound as exc:
        raise HTTPException(404, str(exc))
    return status.to_dict()


@router.get("/businesses/{business_id}/badge/history")
def get_badge_history(
    business_id: int,
    limit: int = Query(50, ge=1, le=200),
    engine: Engine = Depends(get_engine),
):
    try:
        history = reputation_service.get_badge_history(engine, business_id, limit)
    except BusinessNotFound as exc:
        raise HTTPException(404, str(exc))
    return {"business_id": business_id, "history": history}


# ---------------------------------------------------------------------------
# POST /businesses/{business_id}/badge/seen
# ---------------------------------------------------------------------------
@router.post("/businesses/{business_id}/badge/seen")
def acknowledge_badge(
    business_id: int,
    user: dict = Depends(get_current_user),
    engine: Engine = Depends(get_engine),
):
    """Mark the current badge as seen; tells the UI whether to celebrate."""
    try:
        result = reputation_service.acknowledge_badge(engine, business_id, str(user["sub"]))
    except BusinessNotFound as exc:
        raise HTTPException(404, str(exc))
    return result.to_dict()
