"""
Chill Gamer Backend — Document Store Client
============================================

What:  MongoDB client wrapper, readiness gate, FastAPI dependency and the
       helpers that translate driver errors into application exceptions.
Why:   Centralizes all database connection logic in one place. Services never
       see a global connection handle; they receive a `Database` per call.
How:   `Database` owns a pymongo AsyncMongoClient. The lifespan handler in
       main.py calls connect() at startup and close() at shutdown; requests
       obtain the instance through the `get_database` dependency.
Who:   Constructed by create_app(); injected into route handlers.

Connection Policy:
    server:      connect() runs during startup. It pings the deployment and
                 creates the indexes from models.collections. Failure aborts
                 startup, so a process that is up can always reach the store.
    serverless:  connect() runs on the first request instead. An asyncio.Lock
                 makes concurrent cold-start requests share a single attempt.

    Either way requests wait on the readiness gate (an asyncio.Event) for at
    most DB_READY_TIMEOUT seconds before failing with 503.

Timeouts and retries:
    timeoutMS bounds every operation (client-side operation timeout).
    retryReads/retryWrites are off: a failed call is reported immediately.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError
from pymongo.server_api import ServerApi

from chill_gamer.config import settings
from chill_gamer.exceptions import (
    ChillGamerError,
    DatabaseError,
    StorageUnavailableError,
    ValidationError,
)
from chill_gamer.models import collections

logger = logging.getLogger(__name__)


class Database:
    """
    Explicitly constructed handle to the Chill Gamer database.

    Lifecycle:
        1. Database(...)        no I/O, safe to build at import time
        2. await connect()      ping + index bootstrap, opens the readiness gate
        3. collection access    reviews / games / users / watchlist
        4. await close()        closes pooled connections, closes the gate

    Args:
        uri:         MongoDB connection string
        name:        Database name inside the deployment
        timeout_ms:  Per-operation bound passed to the driver as timeoutMS
        client:      Pre-built client (tests inject a mock here)
    """

    def __init__(
        self,
        uri: str,
        name: str,
        timeout_ms: int = 10_000,
        client: Optional[AsyncMongoClient] = None,
    ):
        self._uri = uri
        self._name = name
        self._timeout_ms = timeout_ms
        self._client = client
        self._db: Optional[AsyncDatabase] = None
        self._ready = asyncio.Event()
        self._connect_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_connected(self) -> bool:
        return self._ready.is_set()

    def _build_client(self) -> AsyncMongoClient:
        return AsyncMongoClient(
            self._uri,
            server_api=ServerApi("1", deprecation_errors=True),
            timeoutMS=self._timeout_ms,
            retryReads=False,
            retryWrites=False,
            tz_aware=True,
        )

    async def connect(self) -> None:
        """
        Open the connection exactly once and mark the store ready.

        Raises:
            StorageUnavailableError: The deployment did not answer, or a unique
                index could not be built.
        """
        async with self._connect_lock:
            if self._ready.is_set():
                return

            if self._client is None:
                self._client = self._build_client()

            try:
                await self._client.admin.command("ping")
                self._db = self._client[self._name]
                await self._ensure_indexes()
            except ChillGamerError:
                self._db = None
                raise
            except PyMongoError as e:
                self._db = None
                logger.error("MongoDB connection failed: %s", str(e))
                raise StorageUnavailableError(
                    message="Could not connect to the database",
                    context={"database": self._name, "error_type": type(e).__name__},
                ) from e

            self._ready.set()
            logger.info("Connected to MongoDB database '%s'", self._name)

    async def _ensure_indexes(self) -> None:
        # Unique indexes are the only guard against duplicate users and
        # watchlist entries, so failing to build one aborts the connect.
        # A secondary index that cannot be built is only logged.
        for spec in collections.INDEXES:
            try:
                await self._db[spec.collection].create_index(
                    spec.keys, name=spec.name, **spec.options
                )
            except OperationFailure as e:
                if e.timeout:
                    raise
                if spec.options.get("unique"):
                    logger.critical(
                        "Unique index %s on %s could not be built: %s",
                        spec.name,
                        spec.collection,
                        str(e),
                    )
                    raise StorageUnavailableError(
                        context={
                            "index": spec.name,
                            "collection": spec.collection,
                            "error_code": e.code,
                        },
                    ) from e
                logger.warning(
                    "Could not create index %s on %s: %s",
                    spec.name,
                    spec.collection,
                    str(e),
                )

    async def wait_until_ready(self, timeout: float) -> None:
        """
        Block until connect() has succeeded, for at most `timeout` seconds.

        Raises:
            StorageUnavailableError: The gate did not open in time.
        """
        if self._ready.is_set():
            return
        try:
            await asyncio.wait_for(self._ready.wait(), timeout)
        except asyncio.TimeoutError:
            raise StorageUnavailableError(
                context={"database": self._name, "waited_seconds": timeout},
            )

    async def close(self) -> None:
        """Close all pooled connections. Safe to call when never connected."""
        self._ready.clear()
        if self._client is not None:
            await self._client.close()
            self._client = None
        self._db = None

    def collection(self, name: str) -> AsyncCollection:
        if self._db is None:
            raise StorageUnavailableError(context={"collection": name})
        return self._db[name]

    @property
    def reviews(self) -> AsyncCollection:
        return self.collection(collections.REVIEWS)

    @property
    def games(self) -> AsyncCollection:
        return self.collection(collections.GAMES)

    @property
    def users(self) -> AsyncCollection:
        return self.collection(collections.USERS)

    @property
    def watchlist(self) -> AsyncCollection:
        return self.collection(collections.WATCHLIST)


def parse_object_id(value: str, resource: str = "resource") -> ObjectId:
    """
    Convert a path parameter into an ObjectId.

    Raises:
        ValidationError: `value` is not a 24-character hex string.
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(
            message=f"Invalid {resource} id '{value}'",
            field="id",
        )


@asynccontextmanager
async def storage_errors(action: str, **context: Any) -> AsyncIterator[None]:
    """
    Translate driver exceptions raised inside the block.

        application errors           → propagated as-is
        timeout / connection failure → StorageUnavailableError (503)
        any other PyMongoError       → DatabaseError (500)

    Usage:
        async with storage_errors("load reviews"):
            docs = await db.reviews.find().to_list()
    """
    try:
        yield
    except ChillGamerError:
        raise
    except PyMongoError as e:
        ctx = {"action": action, "error_type": type(e).__name__, **context}
        if e.timeout or isinstance(e, ConnectionFailure):
            logger.warning("Database unavailable while trying to %s: %s", action, str(e))
            raise StorageUnavailableError(context=ctx) from e
        logger.error("Database error while trying to %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Could not {action}. Please try again.",
            context=ctx,
        ) from e


# ── Request Dependency ────────────────────────────────────────────────────
async def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the application's Database once it is ready.

    Example usage in a route:
        @router.get("/games")
        async def list_games(db: Database = Depends(get_database)):
            return await game_service.list_games(db)
    """
    database: Database = request.app.state.database
    if settings.deployment_target == "serverless" and not database.is_connected:
        await database.connect()
    await database.wait_until_ready(settings.db_ready_timeout)
    return database


async def get_database_for_diagnostics(request: Request) -> Database:
    """
    Like get_database, but hands back the Database even when it is not ready.

    /health must answer with a partial report instead of a bare 503, so the
    readiness failure is logged and each count then fails on its own.
    """
    try:
        return await get_database(request)
    except StorageUnavailableError as e:
        logger.warning("Health check: database not ready: %s", e.message)
        return request.app.state.database
