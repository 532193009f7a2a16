"""
Chill Gamer Backend — Review Route Handlers
============================================

What:  CRUD endpoints under /chill-gamer/reviews.
How:   Each handler unpacks the request, delegates to ReviewService and
       returns its result. Errors are rendered by the global handlers in main.py.

Route order matters: /reviews/highest-rated is registered before
/reviews/{review_id} so the literal segment is not taken for an id.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from chill_gamer.database import Database, get_database
from chill_gamer.schemas.common import DeletionSummary, ErrorResponse, MutationSummary
from chill_gamer.schemas.review import ReviewIn
from chill_gamer.services.review_service import TOP_RATED_LIMIT, review_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/chill-gamer", tags=["Reviews"])


@router.get(
    "/reviews",
    summary="List all reviews",
    responses={500: {"model": ErrorResponse}},
)
async def list_reviews(db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    return await review_service.list_reviews(db)


@router.get(
    "/reviews/highest-rated",
    summary="Top rated reviews",
    description=f"The {TOP_RATED_LIMIT} reviews with the highest rating, best first.",
    responses={500: {"model": ErrorResponse}},
)
async def list_highest_rated(db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    return await review_service.list_top_rated_reviews(db, limit=TOP_RATED_LIMIT)


@router.get(
    "/reviews/user/{email}",
    summary="Reviews written by one user",
    responses={500: {"model": ErrorResponse}},
)
async def list_user_reviews(
    email: str,
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await review_service.list_reviews_by_user(db, email)


@router.get(
    "/reviews/{review_id}",
    summary="Get a single review by ID",
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Review not found", "model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_review(review_id: str, db: Database = Depends(get_database)) -> Dict[str, Any]:
    return await review_service.get_review(db, review_id)


@router.post(
    "/reviews",
    summary="Create a review",
    description="Stores the body as sent, plus server-assigned createdAt/updatedAt.",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_review(
    review: ReviewIn,
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await review_service.create_review(db, review.model_dump(exclude_unset=True))


@router.put(
    "/reviews/{review_id}",
    response_model=MutationSummary,
    summary="Update fields of a review",
    description=(
        "Replaces only the fields present in the body and refreshes updatedAt. "
        "An unknown id is reported as matchedCount 0."
    ),
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def update_review(
    review_id: str,
    changes: ReviewIn,
    db: Database = Depends(get_database),
) -> MutationSummary:
    return await review_service.update_review(
        db, review_id, changes.model_dump(exclude_unset=True)
    )


@router.delete(
    "/reviews/{review_id}",
    response_model=DeletionSummary,
    summary="Delete a review",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def delete_review(review_id: str, db: Database = Depends(get_database)) -> DeletionSummary:
    return await review_service.delete_review(db, review_id)
