"""
Chill Gamer Backend — Search Route Handlers
============================================

What:  Filtered review search and the genre list used by the filter UI.

Query parameters of /chill-gamer/search/reviews (all optional, ANDed):
    q          case-insensitive substring of gameTitle
    genre      exact genre
    minRating  number; fractional values allowed; non-numeric → 400
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from chill_gamer.database import Database, get_database
from chill_gamer.schemas.common import ErrorResponse
from chill_gamer.services.review_service import parse_min_rating, review_service

router = APIRouter(prefix="/chill-gamer", tags=["Search"])


@router.get(
    "/search/reviews",
    summary="Search reviews",
    responses={
        400: {"description": "minRating is not a number", "model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def search_reviews(
    q: Optional[str] = Query(default=None, description="Substring of the game title"),
    genre: Optional[str] = Query(default=None, description="Exact genre"),
    # Parsed by the service so a bad value gets our 400 body, not FastAPI's 422
    min_rating: Optional[str] = Query(
        default=None, alias="minRating", description="Minimum rating (inclusive)"
    ),
    db: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await review_service.search_reviews(
        db, q=q, genre=genre, min_rating=parse_min_rating(min_rating)
    )


@router.get(
    "/genres",
    summary="Distinct review genres",
    responses={500: {"model": ErrorResponse}},
)
async def list_genres(db: Database = Depends(get_database)) -> List[Any]:
    return await review_service.list_genres(db)
