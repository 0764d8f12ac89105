"""
Users API — Abstract Document Store Interface
===============================================

What:  Abstract base class defining the narrow persistence contract the
       user service depends on.
How:   Concrete backends (MongoUserStore, SqlUserStore) inherit from
       DocumentStore and implement every abstract method.
Who:   Constructed once by the application factory and injected into
       UserService; connected and closed by the application lifespan.

Contract summary:
    connect()               → open + verify connection; raises on failure
    close()                 → release pooled connections
    ping()                  → lightweight liveness probe; never raises
    find_all()              → every user, in insertion order
    find_by_id(id)          → user or None
    insert(user)            → stored user with its assigned id
    update_by_id(id, flds)  → user after the merge, or None
    delete_by_id(id)        → user as it was before removal, or None

    Absence is always reported as None, never as an exception. An id the
    backend cannot even parse is treated the same as an unknown id.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from users_api.schemas.user import UserCreate, UserResponse


class DocumentStore(ABC):
    """
    Abstract interface for user persistence.

    Implementations:
        - MongoUserStore: MongoDB via motor (default backend)
        - SqlUserStore: any async SQLAlchemy database (PostgreSQL, SQLite)

    Any driver exception may escape these methods; the service layer turns
    them into StoreError.
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the connection and verify it with one round trip.

        Raises:
            Any driver error if the store is unreachable. The lifespan wraps
            this call in a retry policy and aborts startup when it gives up.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release every pooled connection. Safe to call more than once."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the store answers a trivial query, False otherwise."""
        ...

    @abstractmethod
    async def find_all(self) -> List[UserResponse]:
        """Return every stored user, oldest first."""
        ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[UserResponse]:
        ...

    @abstractmethod
    async def insert(self, user: UserCreate) -> UserResponse:
        """Persist a new user and return it with the freshly assigned id."""
        ...

    @abstractmethod
    async def update_by_id(
        self, user_id: str, fields: Dict[str, Any]
    ) -> Optional[UserResponse]:
        """
        Merge `fields` into the stored user.

        Fields not named in `fields` keep their stored values. An empty
        `fields` dict leaves the record untouched and returns it as-is.

        Returns:
            The user after the merge, or None if no user has this id.
        """
        ...

    @abstractmethod
    async def delete_by_id(self, user_id: str) -> Optional[UserResponse]:
        """Remove the user and return its last stored state, or None if absent."""
        ...
