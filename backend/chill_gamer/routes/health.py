"""
Chill Gamer Backend — Health & Banner Routes
=============================================

What:  GET / (service banner) and GET /health (store liveness + counts).
Why:   Load balancers and uptime monitors probe /health; humans hit /.
How:   /health counts documents in games, reviews and users. Any failed
       count turns the response into HTTP 500 carrying whatever counts did
       succeed, never an unhandled error.

Status levels:
    200  every count succeeded
    500  at least one count failed (partial info in `database`)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from chill_gamer import __version__
from chill_gamer.config import settings
from chill_gamer.database import Database, get_database_for_diagnostics
from chill_gamer.schemas.common import BannerResponse, HealthResponse
from chill_gamer.services.stats_service import stats_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

ENDPOINTS = {
    "reviews": "/chill-gamer/reviews",
    "watchlist": "/chill-gamer/watchlist/:email",
    "games": "/chill-gamer/games",
    "users": "/chill-gamer/users/:email",
    "search": "/chill-gamer/search/reviews",
}


def _service_name() -> str:
    if settings.deployment_target == "serverless":
        return "Chill Gamer API (serverless)"
    return "Chill Gamer API"


@router.get("/", response_model=BannerResponse, summary="Service banner")
async def banner(request: Request) -> BannerResponse:
    database: Database = request.app.state.database
    return BannerResponse(
        message=f"{_service_name()} v{__version__} is running!",
        database="Connected to MongoDB" if database.is_connected else "Connecting...",
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Counts documents in the games, reviews and users collections. "
        "Returns 500 with partial counts when the store does not answer."
    ),
    responses={500: {"description": "Database error, partial counts included"}},
)
async def health_check(db: Database = Depends(get_database_for_diagnostics)):
    counts = await stats_service.get_stats(db)

    if counts.errors:
        logger.warning("Health check degraded: %s", counts.errors)
        first_error = next(iter(counts.errors.values()))
        return JSONResponse(
            status_code=500,
            content={
                "message": "API running but database error",
                "error": first_error,
                "database": counts.model_dump(),
            },
        )

    return HealthResponse(
        message=f"{_service_name()} is running!",
        timestamp=datetime.now(timezone.utc),
        database=counts,
        endpoints=ENDPOINTS,
    )
