"""
Users API — MongoDB Document Store
====================================

What:  DocumentStore implementation for MongoDB using the motor async driver.
How:   One AsyncIOMotorClient per process; every operation is a single
       collection call. Updates use `$set` with only the fields the client
       sent, so untouched fields survive.
Who:   The default backend, selected by create_store() for mongodb:// and
       mongodb+srv:// URLs.

Document shape in the `users` collection:
    {"_id": ObjectId(...), "name": ..., "age": ..., "email": ...}

Clients see `_id` as the 24-character hex string in the `id` field. A string
that is not a valid ObjectId matches no user.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, ReturnDocument

from users_api.config import settings
from users_api.schemas.user import UserCreate, UserResponse
from users_api.stores.base import DocumentStore

logger = logging.getLogger(__name__)


def _object_id(user_id: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(user_id):
        return None
    return ObjectId(user_id)


def _to_response(doc: Mapping[str, Any]) -> UserResponse:
    return UserResponse(
        id=str(doc["_id"]),
        name=doc.get("name"),
        age=doc.get("age"),
        email=doc.get("email"),
    )


class MongoUserStore(DocumentStore):
    """
    User persistence in a MongoDB collection.

    Args:
        database_url: MongoDB connection string. If it names a database
            (mongodb://host:27017/users) that database is used.
        database_name: Fallback database when the URL has no path;
            defaults to settings.mongo_database.
    """

    COLLECTION = "users"

    def __init__(self, database_url: str, database_name: Optional[str] = None):
        self.database_url = database_url
        self.database_name = database_name or settings.mongo_database
        self._client: Optional[AsyncIOMotorClient] = None
        self._collection = None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self.database_url,
                serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
            )

        # motor connects lazily; ping forces server selection now
        await self._client.admin.command("ping")

        database = self._client.get_default_database(default=self.database_name)
        self._collection = database[self.COLLECTION]
        logger.info("Connected to MongoDB database '%s'", database.name)

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB client closed")
        self._client = None
        self._collection = None

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False

    @property
    def users(self):
        """The connected `users` collection."""
        if self._collection is None:
            raise RuntimeError("MongoUserStore used before connect()")
        return self._collection

    # ── Queries ───────────────────────────────────────────────────────────

    async def find_all(self) -> List[UserResponse]:
        # ObjectIds embed their creation time, so _id order is insertion order
        docs = await self.users.find().sort("_id", ASCENDING).to_list(length=None)
        return [_to_response(doc) for doc in docs]

    async def find_by_id(self, user_id: str) -> Optional[UserResponse]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        doc = await self.users.find_one({"_id": oid})
        return _to_response(doc) if doc is not None else None

    async def insert(self, user: UserCreate) -> UserResponse:
        doc = user.document()
        result = await self.users.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_response(doc)

    async def update_by_id(
        self, user_id: str, fields: Dict[str, Any]
    ) -> Optional[UserResponse]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        if not fields:
            # MongoDB rejects an empty $set
            return await self.find_by_id(user_id)

        doc = await self.users.find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return _to_response(doc) if doc is not None else None

    async def delete_by_id(self, user_id: str) -> Optional[UserResponse]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        doc = await self.users.find_one_and_delete({"_id": oid})
        return _to_response(doc) if doc is not None else None
