from typing import Any

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from shortlink import utils
from shortlink.core.modules.session.models import Session
from shortlink.errors import ConflictError, NotFoundError


class SessionStore:
    """Create, fetch and delete session records in the ``sessions`` collection."""

    def __init__(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        self._collection = collection

    async def create_indexes(self) -> None:
        await self._collection.create_index([("user_id", 1)])
        # MongoDB removes a document shortly after its expires_at passes
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def create(self, session: Session) -> None:
        """Insert a new record. The ``_id`` unique index rejects a reused session id."""
        doc = session.to_mongo()
        doc["expires_at"] = utils.unix_to_datetime(session.expiry_instant)
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise ConflictError(f"Session '{session.id}' already exists") from e

    async def fetch_by_id(self, session_id: int) -> Session:
        doc = await self._collection.find_one({"_id": session_id})
        if doc is None:
            raise NotFoundError(f"Session '{session_id}' not found")
        return Session.model_validate(doc)

    async def delete(self, session_id: int) -> None:
        """Remove a record. Deleting an unknown id is not an error."""
        await self._collection.delete_one({"_id": session_id})

    async def delete_by_user(self, user_id: int) -> int:
        result = await self._collection.delete_many({"user_id": user_id})
        return result.deleted_count
