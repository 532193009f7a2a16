"""
Chill Gamer Backend — Review Request Schemas
=============================================

What:  Body accepted by POST and PUT /chill-gamer/reviews.
Why:   Documents the effective review shape in the OpenAPI docs while keeping
       the store schema-less: every field is optional and values are stored
       exactly as sent (no coercion, so "2022" stays a string).
How:   Routes call model_dump(exclude_unset=True), so a field the client did
       not send is absent from the document rather than null.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReviewIn(BaseModel):
    """
    A full review on create, or the partial set of fields to replace on update.

    Server-owned fields (_id, createdAt, updatedAt) are ignored if sent.
    """
    model_config = ConfigDict(extra="allow")

    gameTitle: Any = Field(default=None, description="Title of the reviewed game")
    gameCover: Any = Field(default=None, description="Cover image URL")
    description: Any = Field(default=None, description="Review text")
    rating: Any = Field(
        default=None,
        description="Reviewer score, usually an integer; no range is enforced",
    )
    year: Any = Field(default=None, description="Release year of the game")
    genre: Any = Field(default=None, description="Genre label, e.g. 'RPG'")
    userEmail: Any = Field(default=None, description="Email of the reviewer")
    userName: Any = Field(default=None, description="Display name of the reviewer")
    userPhoto: Any = Field(default=None, description="Avatar URL of the reviewer")
