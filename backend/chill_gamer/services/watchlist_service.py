"""
Chill Gamer Backend — Watchlist Service
========================================

What:  List, add and remove watchlist entries.
Why:   A user may watch a game only once. The unique index on
       (userEmail, gameTitle) enforces that atomically: the insert itself is
       the check, so two identical concurrent requests cannot both succeed.
How:   DuplicateKeyError from the insert becomes ConflictError (HTTP 400,
       "Already in watchlist"); no document is created in that case.
Who:   Called by routes/watchlist.py.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from pymongo.errors import DuplicateKeyError

from chill_gamer.database import Database, parse_object_id, storage_errors
from chill_gamer.exceptions import ConflictError
from chill_gamer.schemas.common import DeletionSummary, serialize_document

logger = logging.getLogger(__name__)


class WatchlistService:
    """Business logic layer for watchlist operations."""

    async def list_watchlist(self, db: Database, email: str) -> List[Dict[str, Any]]:
        async with storage_errors("load the watchlist"):
            docs = await db.watchlist.find({"userEmail": email}).to_list()
        return [serialize_document(doc) for doc in docs]

    async def add_to_watchlist(self, db: Database, entry: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new entry stamped with addedAt.

        Raises:
            ConflictError: The same user already watches the same game title.
        """
        item = {key: value for key, value in entry.items() if key not in ("_id", "addedAt")}
        item["addedAt"] = datetime.now(timezone.utc)

        async with storage_errors("add to the watchlist"):
            try:
                result = await db.watchlist.insert_one(item)
            except DuplicateKeyError as e:
                logger.info(
                    "Duplicate watchlist entry rejected: %s / %s",
                    item.get("userEmail"),
                    item.get("gameTitle"),
                )
                raise ConflictError(
                    message="Already in watchlist",
                    context={
                        "userEmail": item.get("userEmail"),
                        "gameTitle": item.get("gameTitle"),
                    },
                ) from e

        item["_id"] = result.inserted_id
        return serialize_document(item)

    async def remove_from_watchlist(self, db: Database, entry_id: str) -> DeletionSummary:
        # A missing id is reported as deletedCount == 0, not an error
        oid = parse_object_id(entry_id, "watchlist entry")
        async with storage_errors("remove from the watchlist", entry_id=entry_id):
            result = await db.watchlist.delete_one({"_id": oid})
        return DeletionSummary.from_result(result)


watchlist_service = WatchlistService()
