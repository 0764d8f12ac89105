"""
Users API — User Service (Resource Handler)
=============================================

What:  The five CRUD operations over the User resource.
How:   Each method makes exactly one store call, turns "absent" into
       NotFoundError, and wraps any other store failure in StoreError.
Who:   Called by the /users route handlers; depends only on the
       DocumentStore contract it receives at construction time.

Outcome per operation:
    list_users     → list (200)  | NotFoundError "No users found" (404)
    get_user       → user (200)  | NotFoundError "No user found"  (404)
    create_user    → user (201)
    update_user    → user after merge (200)   | NotFoundError (404)
    delete_user    → user before removal (200) | NotFoundError (404)
    any store failure → StoreError (500), details in the server log only

The service holds no per-request state; one instance serves every request.
"""

import logging
from typing import List

from users_api.exceptions import NotFoundError, StoreError
from users_api.schemas.user import UserCreate, UserResponse, UserUpdate
from users_api.stores.base import DocumentStore

logger = logging.getLogger(__name__)

NO_USERS_FOUND = "No users found"
NO_USER_FOUND = "No user found"


class UserService:
    """
    Request-to-persistence mapping for users.

    Error Handling Strategy:
        NotFoundError is raised here, never by the store. Every other
        exception coming out of the store is logged with its traceback and
        re-raised as StoreError, so clients only ever see the generic 500.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_users(self) -> List[UserResponse]:
        """
        Every stored user in insertion order.

        Raises:
            NotFoundError: The store holds no users (→ 404)
            StoreError: The query failed (→ 500)
        """
        try:
            users = await self.store.find_all()
        except Exception as e:
            logger.error("Store error listing users: %s", str(e), exc_info=True)
            raise StoreError(context={"operation": "list", "error_type": type(e).__name__})

        if not users:
            raise NotFoundError(message=NO_USERS_FOUND)
        return users

    async def get_user(self, user_id: str) -> UserResponse:
        try:
            user = await self.store.find_by_id(user_id)
        except Exception as e:
            logger.error("Store error fetching user %s: %s", user_id, str(e), exc_info=True)
            raise StoreError(context={"operation": "get", "user_id": user_id})

        if user is None:
            raise NotFoundError(message=NO_USER_FOUND, resource_id=user_id)
        return user

    async def create_user(self, payload: UserCreate) -> UserResponse:
        """
        Persist a new user built from the payload.

        Fields missing from the payload stay unset; the store assigns the id.
        """
        try:
            user = await self.store.insert(payload)
        except Exception as e:
            logger.error("Store error creating user: %s", str(e), exc_info=True)
            raise StoreError(context={"operation": "create", "error_type": type(e).__name__})

        logger.info("Created user %s", user.id)
        return user

    async def update_user(self, user_id: str, payload: UserUpdate) -> UserResponse:
        """
        Partial update: merge only the fields present in the payload.

        Concurrent updates to the same id race at the store and the last
        write wins.

        Raises:
            NotFoundError: No user has this id; nothing is written (→ 404)
            StoreError: The update failed (→ 500)
        """
        changes = payload.changes()
        try:
            user = await self.store.update_by_id(user_id, changes)
        except Exception as e:
            logger.error("Store error updating user %s: %s", user_id, str(e), exc_info=True)
            raise StoreError(context={"operation": "update", "user_id": user_id})

        if user is None:
            raise NotFoundError(message=NO_USER_FOUND, resource_id=user_id)
        logger.info("Updated user %s (fields: %s)", user_id, ", ".join(sorted(changes)) or "none")
        return user

    async def delete_user(self, user_id: str) -> UserResponse:
        """Remove a user and return it as it was just before removal."""
        try:
            user = await self.store.delete_by_id(user_id)
        except Exception as e:
            logger.error("Store error deleting user %s: %s", user_id, str(e), exc_info=True)
            raise StoreError(context={"operation": "delete", "user_id": user_id})

        if user is None:
            raise NotFoundError(message=NO_USER_FOUND, resource_id=user_id)
        logger.info("Deleted user %s", user_id)
        return user
