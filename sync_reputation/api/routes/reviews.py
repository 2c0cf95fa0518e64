"""
sync_reputation.api.routes.reviews — Review submission, edits and deletion
===========================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import Engine

from sync_reputation.api.deps import get_config, get_current_user, get_engine
from sync_reputation.config import ReputationConfig
from sync_reputation.exceptions import (
    BusinessNotFound,
    DuplicateReview,
    ReviewDeleted,
    ReviewNotFound,
    ReviewPermissionError,
    ReviewValidationError,
)
from sync_reputation.services import moderation_service

router = APIRouter(tags=["reviews"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class ReviewCreate(BaseModel):
    recommendation: bool
    review_text: str | None = None


class ReviewUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    recommendation: bool | None = None
    review_text: str | None = None


# ---------------------------------------------------------------------------
# POST /businesses/{business_id}/reviews
# ---------------------------------------------------------------------------
@router.post("/businesses/{business_id}/reviews", status_code=201)
def submit_review(
    business_id: int,
    body: ReviewCreate,
    user: dict = Depends(get_current_user),
    engine: Engine = Depends(get_engine),
    cfg: ReputationConfig = Depends(get_config),
):
    try:
        return moderation_service.submit_review(
            engine,
            cfg,
            business_id=business_id,
            user_id=str(user["sub"]),
            recommendation=body.recommendation,
            review_text=body.review_text,
        )
    except ReviewValidationError as exc:
        raise HTTPException(422, str(exc))
    except BusinessNotFound as exc:
        raise HTTPException(404, str(exc))
    except DuplicateReview as exc:
        raise HTTPException(409, str(exc))


# ---------------------------------------------------------------------------
# PATCH / DELETE /businesses/{business_id}/reviews/{review_id}
# ---------------------------------------------------------------------------
@router.patch("/businesses/{business_id}/reviews/{review_id}")
def update_review(
    business_id: int,
    review_id: int,
    body: ReviewUpdate,
    user: dict = Depends(get_current_user),
    engine: Engine = Depends(get_engine),
    cfg: ReputationConfig = Depends(get_config),
):
    """Author-only edit.  ``review_text: null`` clears the text."""
    try:
        return moderation_service.update_review(
            engine,
            cfg,
            business_id=business_id,
            review_id=review_id,
            user_id=str(user["sub"]),
            **body.model_dump(exclude_unset=True),
        )
    except ReviewValidationError as exc:
        raise HTTPException(422, str(exc))
    except ReviewNotFound as exc:
        raise HTTPException(404, str(exc))
    except ReviewPermissionError as exc:
        raise HTTPException(403, str(exc))
    except ReviewDeleted as exc:
        raise HTTPException(409, str(exc))


@router.delete("/businesses/{business_id}/reviews/{review_id}")
def delete_review(
    business_id: int,
    review_id: int,
    user: dict = Depends(get_current_user),
    engine: Engine = Depends(get_engine),
):
    """Author-only soft delete."""
    try:
        return moderation_service.delete_review(
            engine,
            business_id=business_id,
            review_id=review_id,
            user_id=str(user["sub"]),
        )
    except ReviewNotFound as exc:
        raise HTTPException(404, str(exc))
    except ReviewPermissionError as exc:
        raise HTTPException(403, str(exc))
    except ReviewDeleted as exc:
        raise HTTPException(409, str(exc))
