"""
Users API — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract for the User resource.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate the OpenAPI documentation. Stores also return
       `UserResponse` instances so every backend produces the same shape.
When:  Parsed on every write request (input) and serialized on every response.

Field rules:
    All three user fields are optional on input. Unknown fields are dropped
    (Pydantic's default `extra="ignore"`), and missing fields stay unset.
    Nothing here checks email format or uniqueness.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class UserFields(BaseModel):
    """The mutable attributes of a user; shared by every user schema."""

    name: Optional[str] = Field(default=None, description="Display name")
    age: Optional[Union[int, float]] = Field(default=None, description="Age in years")
    email: Optional[str] = Field(default=None, description="Contact email (not validated)")

    @field_validator("age")
    @classmethod
    def whole_ages_are_ints(cls, v: Optional[Union[int, float]]) -> Optional[Union[int, float]]:
        """A whole-number age reads back as 5, not 5.0, even from a float column."""
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v


class UserCreate(UserFields):
    """
    What:  Body of POST /users.
    How:   Every field is optional; the store assigns the identifier.
    """

    def document(self) -> Dict[str, Any]:
        """Fields to persist for a new user, skipping ones the client never sent."""
        return self.model_dump(exclude_unset=True)


class UserUpdate(UserFields):
    """
    What:  Body of PUT /users/{id}.
    How:   Partial update; only the fields present in the request body are
           applied. A field sent as an explicit null is cleared.
    """

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, ready to merge into the stored record."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(UserFields):
    """
    What:  Full representation of a stored user.
    Who:   Returned by every /users endpoint and by every DocumentStore method.

    `id` is opaque to clients: an ObjectId hex string on MongoDB, a UUID
    string on SQL backends.
    """

    id: str = Field(description="Store-assigned identifier")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and store status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
