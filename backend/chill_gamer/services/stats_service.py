"""
Chill Gamer Backend — Stats Service
====================================

What:  Document counts for the games, reviews and users collections.
Why:   GET /health reports them so a monitor can tell "process up" apart from
       "process up and the store answers queries".
How:   The three counts run concurrently. Each one fails on its own: a broken
       count is reported as null with its error message, and the others are
       still returned.
"""

import asyncio
import logging
from typing import Dict

from chill_gamer.database import Database, storage_errors
from chill_gamer.models import collections
from chill_gamer.schemas.common import CollectionCounts

logger = logging.getLogger(__name__)


class StatsService:

    COUNTED_COLLECTIONS = (collections.GAMES, collections.REVIEWS, collections.USERS)

    async def _count(self, db: Database, name: str) -> int:
        async with storage_errors(f"count {name}"):
            return await db.collection(name).count_documents({})

    async def get_stats(self, db: Database) -> CollectionCounts:
        """
        Never raises for store failures; inspect `status` and `errors` instead.

        Returns:
            CollectionCounts with status "Connected" when every count
            succeeded, "Error" otherwise.
        """
        results = await asyncio.gather(
            *(self._count(db, name) for name in self.COUNTED_COLLECTIONS),
            return_exceptions=True,
        )

        counts: Dict[str, int] = {}
        errors: Dict[str, str] = {}
        for name, result in zip(self.COUNTED_COLLECTIONS, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result  # cancellation must not be reported as a failed count
                errors[name] = getattr(result, "message", str(result))
                logger.warning("Stats: counting %s failed: %s", name, errors[name])
            else:
                counts[name] = result

        return CollectionCounts(
            status="Error" if errors else "Connected",
            errors=errors,
            **counts,
        )


stats_service = StatsService()
