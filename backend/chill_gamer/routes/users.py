"""
Chill Gamer Backend — User Route Handlers
==========================================

What:  Profile lookup and login upsert under /chill-gamer/users.

GET /chill-gamer/users/{email} answers 200 with a null body for an unknown
email. The frontend relies on that to detect a first sign-in, so it is not
a 404.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from chill_gamer.database import Database, get_database
from chill_gamer.schemas.common import ErrorResponse
from chill_gamer.schemas.user import UserIn, UserUpsertResponse
from chill_gamer.services.user_service import user_service

router = APIRouter(prefix="/chill-gamer", tags=["Users"])


@router.get(
    "/users/{email}",
    summary="Get a user by email",
    description="Returns the user document, or null when no user has this email.",
    responses={500: {"model": ErrorResponse}},
)
async def get_user(email: str, db: Database = Depends(get_database)) -> Optional[Dict[str, Any]]:
    return await user_service.get_user(db, email)


@router.post(
    "/users",
    response_model=UserUpsertResponse,
    summary="Create or update a user",
    description="Upsert keyed by email. lastLogin is refreshed; joinDate is kept once set.",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upsert_user(user: UserIn, db: Database = Depends(get_database)) -> UserUpsertResponse:
    result = await user_service.upsert_user(db, user.model_dump(exclude_unset=True))
    return UserUpsertResponse(message="User processed successfully", result=result)
