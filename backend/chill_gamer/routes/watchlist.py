"""
Chill Gamer Backend — Watchlist Route Handlers
===============================================

What:  GET/POST/DELETE under /chill-gamer/watchlist.

Note the asymmetric paths: listing is keyed by email, deleting by entry id.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from chill_gamer.database import Database, get_database
from chill_gamer.schemas.common import DeletionSummary, ErrorResponse
from chill_gamer.schemas.watchlist import WatchlistEntryIn
from chill_gamer.services.watchlist_service import watchlist_service

router = APIRouter(prefix="/chill-gamer", tags=["Watchlist"])


@router.get(
    "/watchlist/{email}",
    summary="A user's watchlist",
    responses={500: {"model": ErrorResponse}},
)
async def list_watchlist(email: str, db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    return await watchlist_service.list_watchlist(db, email)


@router.post(
    "/watchlist",
    summary="Add a game to a watchlist",
    responses={
        400: {"description": "Already in watchlist", "model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def add_to_watchlist(
    entry: WatchlistEntryIn,
    db: Database = Depends(get_database),
) -> Dict[str, Any]:
    return await watchlist_service.add_to_watchlist(db, entry.model_dump(exclude_unset=True))


@router.delete(
    "/watchlist/{entry_id}",
    response_model=DeletionSummary,
    summary="Remove a watchlist entry",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def remove_from_watchlist(
    entry_id: str,
    db: Database = Depends(get_database),
) -> DeletionSummary:
    return await watchlist_service.remove_from_watchlist(db, entry_id)
