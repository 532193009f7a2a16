"""
Chill Gamer Backend — Shared Response Schemas
==============================================

What:  Response models shared by several routers, plus the JSON conversion of
       raw MongoDB documents.
Why:   Write operations return driver result objects; clients have always
       received them as camelCase summaries (matchedCount, deletedCount, ...).
       Documents contain ObjectIds that JSON cannot represent directly.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, Field
from pymongo.results import DeleteResult, UpdateResult


def serialize_document(value: Any) -> Any:
    """
    Make a MongoDB document JSON-friendly.

    ObjectIds (at any depth) become their 24-hex string form. Datetimes are
    left for FastAPI's encoder, which renders them as ISO 8601.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_document(item) for item in value]
    return value


class MutationSummary(BaseModel):
    """
    What:  Outcome of an update or upsert.
    Who:   PUT /chill-gamer/reviews/{id}, POST /chill-gamer/users.

    matchedCount == 0 means no document had the given id; that is reported,
    not raised.
    """
    acknowledged: bool = Field(description="Whether the server acknowledged the write")
    matchedCount: int = Field(description="Documents matching the filter")
    modifiedCount: int = Field(description="Documents actually changed")
    upsertedCount: int = Field(default=0, description="1 when an upsert inserted a document")
    upsertedId: Optional[str] = Field(default=None, description="Id of the inserted document")

    @classmethod
    def from_result(cls, result: UpdateResult) -> "MutationSummary":
        upserted_id = result.upserted_id
        return cls(
            acknowledged=result.acknowledged,
            matchedCount=result.matched_count,
            modifiedCount=result.modified_count,
            upsertedCount=1 if upserted_id is not None else 0,
            upsertedId=str(upserted_id) if upserted_id is not None else None,
        )


class DeletionSummary(BaseModel):
    """
    What:  Outcome of a delete by id.
    Who:   DELETE /chill-gamer/reviews/{id}, DELETE /chill-gamer/watchlist/{id}.
    """
    acknowledged: bool = Field(description="Whether the server acknowledged the delete")
    deletedCount: int = Field(description="Documents removed (0 when the id did not exist)")

    @classmethod
    def from_result(cls, result: DeleteResult) -> "DeletionSummary":
        return cls(acknowledged=result.acknowledged, deletedCount=result.deleted_count)


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every endpoint except /health.

    Example:
        {"error": "Review not found", "request_id": "1f0c9a2b"}
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class BannerResponse(BaseModel):
    """Returned by GET / so a browser hit shows the service is alive."""
    message: str
    database: str = Field(description="'Connected to MongoDB' or 'Connecting...'")
    environment: str
    timestamp: datetime


class CollectionCounts(BaseModel):
    """Document counts per primary collection; null when that count failed."""
    status: str = Field(description="'Connected' or 'Error'")
    games: Optional[int] = None
    reviews: Optional[int] = None
    users: Optional[int] = None
    errors: Dict[str, str] = Field(default_factory=dict, description="Failed counts by collection")


class HealthResponse(BaseModel):
    """
    What:  Liveness/diagnostics body of GET /health.
    Why:   Counting documents proves the store answers queries, not merely
           that the process is running.
    """
    message: str
    timestamp: datetime
    database: CollectionCounts
    endpoints: Dict[str, str]
