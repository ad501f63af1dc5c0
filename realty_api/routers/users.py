"""
Staff user API endpoints for CRUD operations, search and pagination.
No response in this module ever carries the password.
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from typing import Optional, List

from realty_api.services.user import UserService
from realty_api.services.error_handler import ERROR_RESPONSES
from realty_api.schemas.common import MessageResponse, PaginationParams
from realty_api.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    UserSearchResponse,
    UserImagesResponse,
)
from realty_api.utils.dependencies import get_pagination, get_user_service
from realty_api.utils.validators import ValidationUtils, compact, single_or_list


router = APIRouter(prefix="/users", tags=["Users"], responses=ERROR_RESPONSES)


@router.get("", response_model=List[UserResponse], summary="List active users")
@router.get("/", response_model=List[UserResponse], include_in_schema=False)
async def list_users(
    user_service: UserService = Depends(get_user_service)
) -> List[UserResponse]:
    users = await user_service.list_users()
    return [UserResponse.model_validate(user) for user in users]


@router.get("/search", response_model=UserSearchResponse, summary="Search active users")
async def search_users(
    q: Optional[str] = Query(None, description="Matches name, email, bio or skills"),
    role: Optional[str] = Query(None, description="Exact role, or 'all'"),
    department: Optional[str] = Query(None, description="Exact department, or 'all'"),
    pagination: PaginationParams = Depends(get_pagination),
    user_service: UserService = Depends(get_user_service)
) -> UserSearchResponse:
    """Search active users; the response echoes the effective search parameters."""
    return await user_service.search_users(q or None, role or None, department or None, pagination)


@router.get("/paginated", response_model=UserListResponse, summary="List active users page by page")
async def list_users_paginated(
    pagination: PaginationParams = Depends(get_pagination),
    user_service: UserService = Depends(get_user_service)
) -> UserListResponse:
    return await user_service.list_users_paginated(pagination)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by ID")
async def get_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    """Fetch one user. Inactive users are returned too."""
    record_id = ValidationUtils.parse_record_id(user_id, "User")
    user = await user_service.get_user(record_id)
    return UserResponse.model_validate(user)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new user"
)
@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_user(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    skills: Optional[List[str]] = Form(None, description="JSON array, repeated fields or a single skill"),
    password: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    """
    Create a user from a multipart form.
    Up to 5 images of at most 5MB each may be attached under the `images` field.
    """
    user_data = UserCreate.model_validate(compact(
        name=name,
        email=email,
        phone=phone,
        role=role,
        department=department,
        bio=bio,
        skills=single_or_list(skills),
        password=password,
    ))
    user = await user_service.create_user(user_data, images)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse, summary="Update user")
async def update_user(
    user_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    skills: Optional[List[str]] = Form(None),
    password: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    """
    Update a user. Only non-empty values replace stored ones, skills are
    replaced when sent and new images are appended.
    """
    record_id = ValidationUtils.parse_record_id(user_id, "User")
    user_data = UserUpdate.model_validate(compact(
        name=name,
        email=email,
        phone=phone,
        role=role,
        department=department,
        bio=bio,
        skills=single_or_list(skills),
        password=password,
    ))
    user = await user_service.update_user(record_id, user_data, images)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete user")
async def delete_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service)
) -> MessageResponse:
    """Hard delete a user and, best effort, its image files."""
    record_id = ValidationUtils.parse_record_id(user_id, "User")
    await user_service.delete_user(record_id)
    return MessageResponse(message="User deleted successfully")


@router.delete(
    "/{user_id}/images/{image_index}",
    response_model=UserImagesResponse,
    summary="Delete one user image"
)
async def delete_user_image(
    user_id: str,
    image_index: str,
    user_service: UserService = Depends(get_user_service)
) -> UserImagesResponse:
    record_id = ValidationUtils.parse_record_id(user_id, "User")
    images = await user_service.delete_user_image(record_id, image_index)
    return UserImagesResponse(message="Image deleted successfully", images=images)
