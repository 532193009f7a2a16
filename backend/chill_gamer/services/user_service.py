"""
Chill Gamer Backend — User Service
===================================

What:  Fetch a user profile by email and record logins via upsert.
Why:   The frontend calls POST /chill-gamer/users after every sign-in; the
       same email must always land on the same document.
How:   update_one(filter={email}, upsert=True). The unique index on
       users.email backs the "one document per email" rule.

Field ownership on upsert:
    lastLogin   always the server time of this call
    joinDate    client value when sent; otherwise set once via $setOnInsert
                and never touched again
    role        client value when sent; otherwise "user" on first creation
    (others)    replaced with the client values; nulls are ignored
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from chill_gamer.database import Database, storage_errors
from chill_gamer.exceptions import ValidationError
from chill_gamer.schemas.common import MutationSummary, serialize_document

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"


class UserService:
    """Business logic layer for user profiles."""

    async def get_user(self, db: Database, email: str) -> Optional[Dict[str, Any]]:
        """
        Return the user with this exact email, or None.

        A missing user is not an error: the route answers 200 with a null
        body, which the frontend treats as "first visit".
        """
        async with storage_errors("load the user"):
            doc = await db.users.find_one({"email": email})
        return serialize_document(doc) if doc is not None else None

    async def upsert_user(self, db: Database, body: Dict[str, Any]) -> MutationSummary:
        """
        Create the user on first sight, update it afterwards.

        Raises:
            ValidationError: The body has no usable email.
        """
        email = body.get("email")
        if not isinstance(email, str) or not email.strip():
            raise ValidationError(message="email is required", field="email")

        now = datetime.now(timezone.utc)
        fields = {
            key: value
            for key, value in body.items()
            if key not in ("_id", "lastLogin") and value is not None
        }
        fields["lastLogin"] = now

        on_insert: Dict[str, Any] = {}
        if "joinDate" not in fields:
            on_insert["joinDate"] = now
        if "role" not in fields:
            on_insert["role"] = DEFAULT_ROLE

        update: Dict[str, Any] = {"$set": fields}
        if on_insert:
            update["$setOnInsert"] = on_insert

        async with storage_errors("save the user", email=email):
            result = await db.users.update_one({"email": email}, update, upsert=True)

        if result.upserted_id is not None:
            logger.info("New user created: %s", email)
        return MutationSummary.from_result(result)


user_service = UserService()
