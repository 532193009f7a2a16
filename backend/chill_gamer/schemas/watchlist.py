"""
Chill Gamer Backend — Watchlist Request Schemas
================================================

What:  Body accepted by POST /chill-gamer/watchlist.
Why:   userEmail and gameTitle together identify an entry (unique index);
       the remaining fields are denormalized display data stored as sent.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WatchlistEntryIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    userEmail: Optional[str] = Field(default=None, description="Owner of the watchlist")
    gameTitle: Optional[str] = Field(default=None, description="Title of the game to watch")
