"""
sync_reputation.api.routes.admin — Moderation endpoints (JWT‑protected)
========================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import Engine

from sync_reputation.api.deps import get_current_admin, get_engine
from sync_reputation.exceptions import ModerationError, ReviewNotFound
from sync_reputation.services import moderation_service, reputation_service

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class RejectBody(BaseModel):
    reason: str


# ---------------------------------------------------------------------------
# Review moderation
# ---------------------------------------------------------------------------
@router.get("/reviews/pending")
def list_pending_reviews(
    limit: int = Query(50, ge=1, le=200),
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    return {
        "total": moderation_service.get_pending_count(engine),
        "reviews": moderation_service.get_pending_reviews(engine, limit),
    }


@router.post("/reviews/{review_id}/approve")
def approve_review(
    review_id: int,
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    try:
        return moderation_service.approve_review(engine, review_id, str(admin["sub"]))
    except ReviewNotFound as exc:
        raise HTTPException(404, str(exc))
    except ModerationError as exc:
        raise HTTPException(400, str(exc))


@router.post("/reviews/{review_id}/reject")
def reject_review(
    review_id: int,
    body: RejectBody,
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    try:
        return moderation_service.reject_review(
            engine, review_id, str(admin["sub"]), body.reason,
        )
    except ReviewNotFound as exc:
        raise HTTPException(404, str(exc))
    except ModerationError as exc:
        raise HTTPException(400, str(exc))


# ---------------------------------------------------------------------------
# Badge maintenance
# ---------------------------------------------------------------------------
@router.post("/badges/recompute")
def recompute_badges(
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    """Rebuild every business's cached reputation from approved reviews."""
    changed = reputation_service.recompute_all(engine)
    return {"changed": changed}
