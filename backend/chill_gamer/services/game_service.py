"""
Chill Gamer Backend — Game Service
===================================

What:  Read-only access to the game catalog.
Who:   Called by routes/games.py.

The catalog is maintained outside the API; there are no write operations.
"""

from typing import Any, Dict, List

from chill_gamer.database import Database, parse_object_id, storage_errors
from chill_gamer.exceptions import NotFoundError
from chill_gamer.schemas.common import serialize_document


class GameService:

    async def list_games(self, db: Database) -> List[Dict[str, Any]]:
        async with storage_errors("load games"):
            docs = await db.games.find().to_list()
        return [serialize_document(doc) for doc in docs]

    async def get_game(self, db: Database, game_id: str) -> Dict[str, Any]:
        """
        Raises:
            ValidationError: game_id is not a valid ObjectId (→ 400)
            NotFoundError: No game has this id (→ 404)
        """
        oid = parse_object_id(game_id, "game")
        async with storage_errors("load the game", game_id=game_id):
            doc = await db.games.find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(resource="Game", resource_id=game_id)
        return serialize_document(doc)


game_service = GameService()
