"""
Chill Gamer Backend — Review Service
=====================================

What:  All operations on the `reviews` collection, including search and the
       genre listing.
Why:   Keeps route handlers thin; each method is one store round-trip.
How:   Receives the Database for each call, wraps the driver call in
       storage_errors() and returns JSON-ready documents or summaries.
Who:   Called by routes/reviews.py and routes/search.py.

Design Decision:
    ReviewService is stateless, like the other services. It receives the
    Database per call, so tests pass a mock and nothing is shared between
    requests.
"""

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING

from chill_gamer.database import Database, parse_object_id, storage_errors
from chill_gamer.exceptions import NotFoundError, ValidationError
from chill_gamer.schemas.common import DeletionSummary, MutationSummary, serialize_document

logger = logging.getLogger(__name__)

# Fields the server owns; client bodies cannot set or overwrite them
SERVER_FIELDS = ("_id", "createdAt", "updatedAt")

TOP_RATED_LIMIT = 6


def _client_fields(body: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in body.items() if key not in SERVER_FIELDS}


def parse_min_rating(raw: Optional[str]) -> Optional[float]:
    """
    Parse the minRating query parameter.

    Fractional thresholds are honored (4.5 keeps only ratings >= 4.5).
    Blank input means "no constraint".

    Raises:
        ValidationError: The value is not a finite number.
    """
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(
            message=f"minRating must be a number, got '{raw}'",
            field="minRating",
        )
    if not math.isfinite(value):
        raise ValidationError(
            message=f"minRating must be a finite number, got '{raw}'",
            field="minRating",
        )
    return value


def build_search_filter(
    q: Optional[str] = None,
    genre: Optional[str] = None,
    min_rating: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Compose the MongoDB filter for review search. All present filters are ANDed.

        q           gameTitle contains q, case-insensitive (q is matched literally)
        genre       genre equals the value exactly
        min_rating  rating >= min_rating
    """
    query: Dict[str, Any] = {}
    if q:
        query["gameTitle"] = {"$regex": re.escape(q), "$options": "i"}
    if genre:
        query["genre"] = genre
    if min_rating is not None:
        query["rating"] = {"$gte": min_rating}
    return query


class ReviewService:
    """
    Business logic layer for review operations.

    Error Handling Strategy:
        Lookups that must return exactly one review raise NotFoundError.
        Malformed ids raise ValidationError before the store is touched.
        Driver failures are translated by storage_errors().
    """

    async def list_reviews(self, db: Database) -> List[Dict[str, Any]]:
        async with storage_errors("load reviews"):
            docs = await db.reviews.find().to_list()
        return [serialize_document(doc) for doc in docs]

    async def list_top_rated_reviews(
        self, db: Database, limit: int = TOP_RATED_LIMIT
    ) -> List[Dict[str, Any]]:
        """
        Highest-rated reviews first, at most `limit` of them.

        Ties on rating are broken by _id ascending, i.e. the older review
        wins; the order is stable across calls.
        """
        async with storage_errors("load highest rated reviews"):
            docs = await (
                db.reviews.find()
                .sort([("rating", DESCENDING), ("_id", ASCENDING)])
                .limit(limit)
                .to_list()
            )
        return [serialize_document(doc) for doc in docs]

    async def get_review(self, db: Database, review_id: str) -> Dict[str, Any]:
        """
        Raises:
            ValidationError: review_id is not a valid ObjectId (→ 400)
            NotFoundError: No review has this id (→ 404)
        """
        oid = parse_object_id(review_id, "review")
        async with storage_errors("load the review", review_id=review_id):
            doc = await db.reviews.find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(resource="Review", resource_id=review_id)
        return serialize_document(doc)

    async def list_reviews_by_user(self, db: Database, email: str) -> List[Dict[str, Any]]:
        # Exact, case-sensitive match on the stored email
        async with storage_errors("load the user's reviews"):
            docs = await db.reviews.find({"userEmail": email}).to_list()
        return [serialize_document(doc) for doc in docs]

    async def create_review(self, db: Database, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a new review and return it with its generated _id.

        No field is required; createdAt and updatedAt are set to the same
        server time.
        """
        now = datetime.now(timezone.utc)
        review = {**_client_fields(body), "createdAt": now, "updatedAt": now}
        async with storage_errors("create the review"):
            result = await db.reviews.insert_one(review)
        review["_id"] = result.inserted_id
        logger.info("Review %s created for '%s'", result.inserted_id, review.get("gameTitle"))
        return serialize_document(review)

    async def update_review(
        self, db: Database, review_id: str, partial: Dict[str, Any]
    ) -> MutationSummary:
        """
        Replace the given top-level fields and bump updatedAt.

        Nested objects are replaced whole, not merged. createdAt cannot be
        changed. A missing id yields matchedCount == 0.
        """
        oid = parse_object_id(review_id, "review")
        changes = {**_client_fields(partial), "updatedAt": datetime.now(timezone.utc)}
        async with storage_errors("update the review", review_id=review_id):
            result = await db.reviews.update_one({"_id": oid}, {"$set": changes})
        return MutationSummary.from_result(result)

    async def delete_review(self, db: Database, review_id: str) -> DeletionSummary:
        oid = parse_object_id(review_id, "review")
        async with storage_errors("delete the review", review_id=review_id):
            result = await db.reviews.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info("Review %s deleted", review_id)
        return DeletionSummary.from_result(result)

    async def search_reviews(
        self,
        db: Database,
        q: Optional[str] = None,
        genre: Optional[str] = None,
        min_rating: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        query = build_search_filter(q=q, genre=genre, min_rating=min_rating)
        async with storage_errors("search reviews"):
            docs = await db.reviews.find(query).to_list()
        return [serialize_document(doc) for doc in docs]

    async def list_genres(self, db: Database) -> List[Any]:
        """Distinct genre values across all reviews, in store order."""
        async with storage_errors("load genres"):
            return await db.reviews.distinct("genre")


# ── Singleton Instance ────────────────────────────────────────────────────
review_service = ReviewService()
