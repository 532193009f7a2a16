"""
Chill Gamer Backend — Collection Definitions
=============================================

What:  Names of the MongoDB collections and the indexes each one needs.
Why:   The store is schema-less; the only constraints it enforces are the
       ones declared here. They are created at startup by Database.connect().

Collections:
    reviews    Game reviews written by users (free-form documents)
    games      Game catalog
    users      User profiles, keyed by email for upserts
    watchlist  (userEmail, gameTitle) pairs a user wants to revisit

Index Design:
    users.email unique:
        A user upsert filters on email. Without a unique index two concurrent
        first logins could both insert.
    watchlist (userEmail, gameTitle) unique:
        Adding to the watchlist is a plain insert; a duplicate pair raises
        DuplicateKeyError, which the service maps to ConflictError.
    reviews.userEmail / watchlist.userEmail:
        "My reviews" and "my watchlist" lookups filter on this field.
    reviews.rating descending:
        Serves the highest-rated listing without an in-memory sort.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from pymongo import ASCENDING, DESCENDING

REVIEWS = "reviews"
GAMES = "games"
USERS = "users"
WATCHLIST = "watchlist"


@dataclass(frozen=True)
class IndexSpec:
    """One index to create on a collection."""

    collection: str
    keys: List[Tuple[str, int]]
    name: str
    options: Dict[str, object] = field(default_factory=dict)


INDEXES: List[IndexSpec] = [
    IndexSpec(USERS, [("email", ASCENDING)], "uniq_users_email", {"unique": True}),
    IndexSpec(
        WATCHLIST,
        [("userEmail", ASCENDING), ("gameTitle", ASCENDING)],
        "uniq_watchlist_user_game",
        {"unique": True},
    ),
    IndexSpec(REVIEWS, [("userEmail", ASCENDING)], "idx_reviews_user_email"),
    IndexSpec(REVIEWS, [("rating", DESCENDING), ("_id", ASCENDING)], "idx_reviews_rating"),
]
