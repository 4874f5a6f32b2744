"""
Users Router
Endpoints for user management.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from userdir.api.dependencies import get_user_service
from userdir.config import settings
from userdir.schemas.common import PaginatedResponse
from userdir.schemas.user import UserCreate, UserResponse, UserUpdate
from userdir.services.user_service import UserService

router = APIRouter()

NOTIFICATION_HEADER = "X-Activation-Notification"


@router.get("/", response_model=PaginatedResponse[UserResponse])
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    service: UserService = Depends(get_user_service),
):
    """
    List users, oldest first.
    """
    return await service.list_users(page=page, page_size=page_size)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    """
    Create a new user if the login and email are not already used, and
    queue the activation message. The user needs to be activated.
    """
    result = await service.create_user(user_data)

    response.headers["Location"] = f"{settings.api_prefix}/users/{result.user.login}"
    response.headers[NOTIFICATION_HEADER] = "queued" if result.notified else "failed"
    return result.user


@router.put("/", response_model=UserResponse)
async def update_user(
    user_data: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    """
    Update an existing user.
    """
    return await service.update_user(user_data)


@router.get("/{login}", response_model=UserResponse)
async def get_user(
    login: str = Path(..., pattern=settings.login_regex),
    service: UserService = Depends(get_user_service),
):
    """
    Get a user by login.
    """
    user = await service.get_user_by_login(login)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.delete("/{login}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    login: str = Path(..., pattern=settings.login_regex),
    service: UserService = Depends(get_user_service),
):
    """
    Delete a user by login. Deleting an unknown login succeeds.
    """
    await service.delete_user(login)
    return None
