"""
Chill Gamer Backend — Game Route Handlers
==========================================

What:  Read-only catalog endpoints under /chill-gamer/games.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from chill_gamer.database import Database, get_database
from chill_gamer.schemas.common import ErrorResponse
from chill_gamer.services.game_service import game_service

router = APIRouter(prefix="/chill-gamer", tags=["Games"])


@router.get("/games", summary="List all games", responses={500: {"model": ErrorResponse}})
async def list_games(db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    return await game_service.list_games(db)


@router.get(
    "/games/{game_id}",
    summary="Get a single game by ID",
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Game not found", "model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_game(game_id: str, db: Database = Depends(get_database)) -> Dict[str, Any]:
    return await game_service.get_game(db, game_id)
