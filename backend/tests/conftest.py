"""
Chill Gamer Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests must not need a running MongoDB.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── mock_db:        Database stand-in whose collections are MagicMocks
    │                   (assert on the exact filters/updates sent to the driver)
    ├── memory_db:      Database stand-in backed by InMemoryCollection
    │                   (multi-step scenarios: create → get → delete → get)
    ├── test_client:    HTTPX AsyncClient against the app, wired to mock_db
    └── memory_client:  HTTPX AsyncClient against the app, wired to memory_db
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["DATABASE_NAME"] = "chill_gamer_test"
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import DuplicateKeyError


# ══════════════════════════════════════════════════════════════════════════
# Driver Doubles
# ══════════════════════════════════════════════════════════════════════════

def make_cursor(docs: List[Dict[str, Any]]) -> MagicMock:
    """
    A chainable stand-in for AsyncCursor: find().sort().limit().to_list().
    """
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def make_update_result(matched: int = 1, modified: int = 1, upserted_id=None):
    return SimpleNamespace(
        acknowledged=True,
        matched_count=matched,
        modified_count=modified,
        upserted_id=upserted_id,
    )


def make_delete_result(deleted: int = 1):
    return SimpleNamespace(acknowledged=True, deleted_count=deleted)


def make_mongo_client():
    """
    AsyncMongoClient stand-in: ping succeeds and every client[db][coll]
    lookup returns the same collection mock with an async create_index.

    Returns:
        (client, database mock, collection mock)
    """
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    client.close = AsyncMock()
    mongo_db = MagicMock()
    index_target = MagicMock()
    index_target.create_index = AsyncMock()
    mongo_db.__getitem__.return_value = index_target
    client.__getitem__.return_value = mongo_db
    return client, mongo_db, index_target


class InMemoryCollection:
    """
    Just enough of AsyncCollection for the service calls.

    Filters support top-level equality only; `unique_keys` emulates a unique
    compound index by raising DuplicateKeyError on insert.
    """

    def __init__(self, unique_keys: Optional[tuple] = None):
        self.docs: List[Dict[str, Any]] = []
        self.unique_keys = unique_keys

    @staticmethod
    def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
        return all(doc.get(key) == value for key, value in query.items())

    def find(self, query: Optional[Dict[str, Any]] = None) -> MagicMock:
        return make_cursor([dict(d) for d in self.docs if self._matches(d, query or {})])

    async def find_one(self, query: Dict[str, Any]):
        for doc in self.docs:
            if self._matches(doc, query):
                return dict(doc)
        return None

    async def insert_one(self, doc: Dict[str, Any]):
        if self.unique_keys:
            key = {k: doc.get(k) for k in self.unique_keys}
            if any(self._matches(existing, key) for existing in self.docs):
                raise DuplicateKeyError("E11000 duplicate key error")
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return SimpleNamespace(acknowledged=True, inserted_id=doc["_id"])

    async def update_one(self, query, update, upsert: bool = False):
        for doc in self.docs:
            if self._matches(doc, query):
                before = dict(doc)
                doc.update(update.get("$set", {}))
                return make_update_result(1, int(doc != before))
        if upsert:
            new_doc = {**query, **update.get("$setOnInsert", {}), **update.get("$set", {})}
            new_doc["_id"] = ObjectId()
            self.docs.append(new_doc)
            return make_update_result(0, 0, upserted_id=new_doc["_id"])
        return make_update_result(0, 0)

    async def delete_one(self, query):
        for index, doc in enumerate(self.docs):
            if self._matches(doc, query):
                del self.docs[index]
                return make_delete_result(1)
        return make_delete_result(0)

    async def count_documents(self, query):
        return sum(1 for doc in self.docs if self._matches(doc, query))

    async def distinct(self, key):
        values = []
        for doc in self.docs:
            if key in doc and doc[key] not in values:
                values.append(doc[key])
        return values


class StubDatabase:
    """Exposes the same collection accessors as chill_gamer.database.Database."""

    def __init__(self, reviews, games, users, watchlist):
        self.reviews = reviews
        self.games = games
        self.users = users
        self.watchlist = watchlist
        self.is_connected = True
        self.name = "chill_gamer_test"

    def collection(self, name: str):
        return getattr(self, name)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db():
    """
    Database whose collections are MagicMocks with async driver methods.

    Usage:
        async def test_get(mock_db):
            mock_db.reviews.find_one.return_value = {"_id": oid}
            await review_service.get_review(mock_db, str(oid))
    """
    def collection_mock():
        coll = MagicMock()
        coll.find.return_value = make_cursor([])
        coll.find_one = AsyncMock(return_value=None)
        coll.insert_one = AsyncMock(
            side_effect=lambda doc: SimpleNamespace(acknowledged=True, inserted_id=ObjectId())
        )
        coll.update_one = AsyncMock(return_value=make_update_result())
        coll.delete_one = AsyncMock(return_value=make_delete_result())
        coll.count_documents = AsyncMock(return_value=0)
        coll.distinct = AsyncMock(return_value=[])
        return coll

    return StubDatabase(collection_mock(), collection_mock(), collection_mock(), collection_mock())


@pytest.fixture
def memory_db():
    """Database backed by in-memory collections with the production unique keys."""
    return StubDatabase(
        reviews=InMemoryCollection(),
        games=InMemoryCollection(),
        users=InMemoryCollection(unique_keys=("email",)),
        watchlist=InMemoryCollection(unique_keys=("userEmail", "gameTitle")),
    )


@pytest.fixture
def sample_review():
    return {
        "gameTitle": "Elden Ring",
        "gameCover": "https://example.com/elden-ring.jpg",
        "description": "Brutal and beautiful.",
        "rating": 5,
        "year": 2022,
        "genre": "RPG",
        "userEmail": "a@b.com",
        "userName": "Tarnished",
    }


def _client_for(database):
    from chill_gamer.database import get_database, get_database_for_diagnostics
    from chill_gamer.main import create_app

    app = create_app(database=database)

    async def override():
        return database

    app.dependency_overrides[get_database] = override
    app.dependency_overrides[get_database_for_diagnostics] = override
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture
async def test_client(mock_db):
    """
    HTTPX AsyncClient routed straight into the app; lifespan does not run,
    so nothing tries to reach MongoDB.
    """
    async with _client_for(mock_db) as client:
        yield client


@pytest_asyncio.fixture
async def memory_client(memory_db):
    async with _client_for(memory_db) as client:
        yield client
