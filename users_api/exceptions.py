"""
Users API — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the error scenarios of the service.
How:   Each exception class carries a client-safe message and an optional
       context dict. Global exception handlers (registered in main.py) catch
       these and return plain-text responses with the matching status code.
Who:   Raised by services and stores; caught by global handlers or by the
       application lifespan.

Exception Hierarchy:
    UsersApiError (base)         → 500 Internal Server Error
    ├── NotFoundError            → 404 Not Found
    ├── StoreError               → 500 Internal Server Error
    └── StoreConnectionError     → startup aborted (never reaches a client)
"""

from typing import Any, Dict, Optional


class UsersApiError(Exception):
    """
    Base exception for all Users API errors.

    Attributes:
        message:  Client-facing error description (safe to return in a response)
        context:  Additional debug info (logged but NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(UsersApiError):
    """
    Raised when a requested user does not exist, or when listing finds none.

    HTTP:    404 Not Found, plain-text body.

    Stores return None for missing records; the service layer converts that
    None into this exception so routes stay free of existence checks.
    """

    def __init__(
        self,
        message: str = "No user found",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class StoreError(UsersApiError):
    """
    Raised when a document store operation fails unexpectedly.

    When:    Connection lost mid-query, driver error, rejected document, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always the generic one; the
    original error type and operation go into `context` for the logs.
    """

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreConnectionError(UsersApiError):
    """
    Raised during startup when the store cannot be reached after all retries.

    Raised out of the application lifespan, so the server refuses to start
    and exits non-zero instead of serving requests without a store.
    """

    def __init__(
        self,
        message: str = "Could not connect to the document store",
        attempts: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if attempts is not None:
            ctx["attempts"] = attempts
        super().__init__(message=message, context=ctx)
        self.attempts = attempts
