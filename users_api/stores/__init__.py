"""
Users API — Document Store Backends
=====================================

What:  Persistence backends behind the DocumentStore contract, plus the
       factory that picks one from a connection URL.

Backend Inventory:
    - base.py:         DocumentStore (abstract contract)
    - mongo_store.py:  MongoUserStore, MongoDB via motor
    - sql_store.py:    SqlUserStore, async SQLAlchemy (PostgreSQL, SQLite)
"""

from typing import Optional

from users_api.config import settings
from users_api.stores.base import DocumentStore
from users_api.stores.mongo_store import MongoUserStore
from users_api.stores.sql_store import SqlUserStore

MONGO_SCHEMES = {"mongodb", "mongodb+srv"}


def create_store(database_url: Optional[str] = None) -> DocumentStore:
    """
    Build an unconnected store for `database_url` (defaults to settings).

    mongodb:// and mongodb+srv:// URLs give a MongoUserStore; every other
    scheme is handed to SQLAlchemy as an async database URL.
    """
    if database_url is None:
        database_url = settings.database_url

    scheme = database_url.split("://", 1)[0].lower()
    if scheme in MONGO_SCHEMES:
        return MongoUserStore(database_url)
    return SqlUserStore(database_url)


__all__ = [
    "DocumentStore",
    "MongoUserStore",
    "SqlUserStore",
    "create_store",
]
