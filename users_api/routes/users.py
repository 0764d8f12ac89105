"""
Users API — User Route Handlers
=================================

What:  The canonical route table for the User resource.
How:   Each route passes the path id and/or the parsed body straight to
       UserService and returns its result. A missing body counts as an
       empty payload. No validation beyond the typed body models and no
       error handling; NotFoundError, StoreError and body errors propagate
       to the global exception handlers.
Who:   Mounted by create_app(); the service instance lives on app.state.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from users_api.schemas.user import UserCreate, UserResponse, UserUpdate
from users_api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

# Plain-text error bodies, documented for the OpenAPI schema
_NOT_FOUND = {404: {"description": "User not found", "content": {"text/plain": {}}}}
_SERVER_ERROR = {500: {"description": "Store failure", "content": {"text/plain": {}}}}


def get_user_service(request: Request) -> UserService:
    """FastAPI dependency returning the service built by create_app()."""
    return request.app.state.user_service


@router.get(
    "",
    response_model=List[UserResponse],
    responses={404: {"description": "No users stored", "content": {"text/plain": {}}}, **_SERVER_ERROR},
    summary="List all users",
)
async def list_users(
    service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    return await service.list_users()


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a single user by ID",
)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.get_user(user_id)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_SERVER_ERROR,
    summary="Create a user",
)
async def create_user(
    payload: Optional[UserCreate] = None,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.create_user(payload if payload is not None else UserCreate())


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a user (partial)",
    description="Only the fields present in the body are changed; the rest keep their stored values.",
)
async def update_user(
    user_id: str,
    payload: Optional[UserUpdate] = None,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.update_user(user_id, payload if payload is not None else UserUpdate())


@router.delete(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a user",
    description="Returns the user as it was immediately before removal.",
)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.delete_user(user_id)
