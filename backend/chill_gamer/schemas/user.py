"""
Chill Gamer Backend — User Schemas
===================================

What:  Body accepted by POST /chill-gamer/users and its response.

Upsert semantics (see UserService.upsert_user):
    - email selects the document and is required
    - lastLogin is always set by the server
    - joinDate is stored when sent, otherwise set once on first creation
    - role defaults to "user" on first creation
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from chill_gamer.schemas.common import MutationSummary


class UserIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = Field(default=None, description="Unique business key of the user")
    name: Optional[str] = Field(default=None, description="Display name")
    photoURL: Optional[str] = Field(default=None, description="Avatar URL")
    joinDate: Optional[datetime] = Field(
        default=None,
        description="Original sign-up time; only needed when importing existing users",
    )
    role: Optional[str] = Field(default=None, description="'user' or 'admin'")


class UserUpsertResponse(BaseModel):
    message: str = Field(default="User processed successfully")
    result: MutationSummary
