"""
User service for managing staff records.
Handles CRUD operations, search and the image list attached to each user.
"""

from typing import Optional, List
from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from realty_api.repositories.user import UserRepository
from realty_api.models.user import User
from realty_api.schemas.common import PaginationParams, UserPagination
from realty_api.schemas.user import (
    UserCreate,
    UserUpdate,
    UserListResponse,
    UserResponse,
    UserSearchInfo,
    UserSearchResponse,
)
from realty_api.services.image import ImageService, user_upload_policy
from realty_api.utils.exceptions import DuplicateKeyError, UserNotFoundError
from realty_api.utils.validators import ValidationUtils
import uuid
import logging

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "User with this email already exists"

# Fields overwritten on update only when the new value is truthy
MERGEABLE_FIELDS = ("name", "email", "phone", "role", "department", "bio")


class UserService:
    """
    User service for staff records.
    Reads that list or search only see active users; the password hash is never returned.
    """

    def __init__(self, db_session: AsyncSession, image_service: Optional[ImageService] = None):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.image_service = image_service or ImageService(user_upload_policy())

    async def list_users(self) -> List[User]:
        """Return all active users."""
        return await self.user_repo.list_active()

    async def list_users_paginated(self, pagination: PaginationParams) -> UserListResponse:
        """Return one page of active users, newest first."""
        users, total = await self.user_repo.list_active_page(pagination.skip, pagination.limit)
        return UserListResponse(
            users=[UserResponse.model_validate(user) for user in users],
            pagination=UserPagination.build(pagination.page, pagination.limit, total),
        )

    async def get_user(self, user_id: uuid.UUID) -> User:
        """
        Get a user by ID. Inactive users can still be fetched directly.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()
        return user

    async def create_user(
        self,
        user_data: UserCreate,
        images: Optional[List[UploadFile]] = None
    ) -> User:
        """
        Create a user with its uploaded images.

        Raises:
            DuplicateKeyError: If a user with this email exists, active or not
        """
        if await self.user_repo.email_taken(user_data.email):
            raise DuplicateKeyError(DUPLICATE_EMAIL)

        image_paths = await self.image_service.save_uploads(images)

        create_data = user_data.model_dump(exclude={"password"})
        create_data["images"] = image_paths
        if user_data.password:
            create_data["hashed_password"] = User.hash_password(user_data.password)

        try:
            user = await self.user_repo.create(create_data)
        except IntegrityError:
            self.image_service.delete_images(image_paths)
            raise DuplicateKeyError(DUPLICATE_EMAIL)
        except Exception:
            self.image_service.delete_images(image_paths)
            raise

        logger.info(f"User created: {user.id}")
        return user

    async def update_user(
        self,
        user_id: uuid.UUID,
        user_data: UserUpdate,
        images: Optional[List[UploadFile]] = None
    ) -> User:
        """
        Merge provided fields into an existing user and append new images.

        Raises:
            UserNotFoundError: If user doesn't exist
            DuplicateKeyError: If the new email belongs to another user
        """
        user = await self.get_user(user_id)

        if user_data.email and user_data.email != user.email:
            if await self.user_repo.email_taken(user_data.email, exclude_id=user.id):
                raise DuplicateKeyError(DUPLICATE_EMAIL)

        new_images = await self.image_service.save_uploads(images)

        # Falsy values never overwrite the stored value
        for field in MERGEABLE_FIELDS:
            value = getattr(user_data, field)
            if value:
                setattr(user, field, value)

        if user_data.skills is not None:
            user.skills = list(user_data.skills)

        if user_data.password:
            user.hashed_password = User.hash_password(user_data.password)

        if new_images:
            user.images = [*user.images, *new_images]

        try:
            user = await self.user_repo.save(user)
        except IntegrityError:
            self.image_service.delete_images(new_images)
            raise DuplicateKeyError(DUPLICATE_EMAIL)
        except Exception:
            self.image_service.delete_images(new_images)
            raise

        logger.info(f"User updated: {user.id}")
        return user

    async def delete_user(self, user_id: uuid.UUID) -> None:
        """
        Hard delete a user, then remove its image files best effort.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        user = await self.get_user(user_id)
        image_paths = list(user.images)

        await self.user_repo.delete(user.id)
        removed = self.image_service.delete_images(image_paths)

        logger.info(f"User deleted: {user_id} ({removed} image file(s) removed)")

    async def delete_user_image(self, user_id: uuid.UUID, image_index: str) -> List[str]:
        """
        Remove one image by position and return the remaining image paths.

        Raises:
            UserNotFoundError: If user doesn't exist
            InvalidIndexError: If the index is outside the image list
        """
        user = await self.get_user(user_id)
        index = ValidationUtils.parse_image_index(image_index, len(user.images))

        images = list(user.images)
        removed_path = images.pop(index)
        self.image_service.delete_image(removed_path)

        user.images = images
        user = await self.user_repo.save(user)

        logger.info(f"Removed image {index} from user {user_id}")
        return list(user.images)

    async def search_users(
        self,
        query: Optional[str],
        role: Optional[str],
        department: Optional[str],
        pagination: PaginationParams
    ) -> UserSearchResponse:
        """Search active users and echo the effective search parameters."""
        users, total = await self.user_repo.search(
            query=query,
            role=role,
            department=department,
            skip=pagination.skip,
            limit=pagination.limit,
        )
        return UserSearchResponse(
            users=[UserResponse.model_validate(user) for user in users],
            search_info=UserSearchInfo(
                query=query or "",
                role=role or "all",
                department=department or "all",
                total_results=total,
            ),
            pagination=UserPagination.build(pagination.page, pagination.limit, total),
        )
