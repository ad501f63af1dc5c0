"""
Property service for managing property listings.
Handles CRUD operations, search, pagination and the image list attached to each property.
"""

from typing import Optional, List
from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from realty_api.repositories.property import PropertyRepository
from realty_api.models.property import Property
from realty_api.schemas.common import PaginationParams, PropertyPagination
from realty_api.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyListResponse,
    PropertyResponse,
    PropertySearchFilters,
)
from realty_api.services.image import ImageService, property_upload_policy
from realty_api.utils.exceptions import DuplicateKeyError, PropertyNotFoundError
from realty_api.utils.validators import ValidationUtils
import uuid
import logging

logger = logging.getLogger(__name__)

DUPLICATE_PROPERTY_ID = "Property with this propertyId already exists"

# Fields overwritten on update only when the new value is truthy
MERGEABLE_FIELDS = (
    "property_id",
    "title",
    "description",
    "price",
    "location",
    "house_number",
    "block_number",
    "property_type",
    "bedrooms",
    "bathrooms",
    "garage",
    "area_size",
    "year_built",
)


class PropertyService:
    """
    Property service for managing property listings.
    Record changes and file changes are separate steps; file cleanup is best effort.
    """

    def __init__(self, db_session: AsyncSession, image_service: Optional[ImageService] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.image_service = image_service or ImageService(property_upload_policy())

    async def list_properties(self) -> List[Property]:
        """Return all properties without filtering."""
        return await self.property_repo.list_all()

    async def list_properties_paginated(self, pagination: PaginationParams) -> PropertyListResponse:
        """Return one page of properties, newest first."""
        return await self.search_properties_paginated(PropertySearchFilters(), pagination)

    async def list_featured_properties(self) -> List[Property]:
        """Return properties flagged as featured."""
        return await self.property_repo.list_featured()

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get property by ID.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError()
        return property_obj

    async def create_property(
        self,
        property_data: PropertyCreate,
        images: Optional[List[UploadFile]] = None
    ) -> Property:
        """
        Create a property with its uploaded images.

        Raises:
            DuplicateKeyError: If the propertyId is already used
        """
        if await self.property_repo.property_id_taken(property_data.property_id):
            raise DuplicateKeyError(DUPLICATE_PROPERTY_ID)

        image_paths = await self.image_service.save_uploads(images)

        create_data = property_data.model_dump()
        create_data["images"] = image_paths

        try:
            property_obj = await self.property_repo.create(create_data)
        except IntegrityError:
            self.image_service.delete_images(image_paths)
            raise DuplicateKeyError(DUPLICATE_PROPERTY_ID)
        except Exception:
            self.image_service.delete_images(image_paths)
            raise

        logger.info(f"Property created: {property_obj.property_id} (ID: {property_obj.id})")
        return property_obj

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        images: Optional[List[UploadFile]] = None
    ) -> Property:
        """
        Merge provided fields into an existing property and append new images.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            DuplicateKeyError: If the new propertyId is used by another property
        """
        property_obj = await self.get_property(property_id)

        new_property_id = property_data.property_id
        if new_property_id and new_property_id != property_obj.property_id:
            if await self.property_repo.property_id_taken(new_property_id, exclude_id=property_obj.id):
                raise DuplicateKeyError(DUPLICATE_PROPERTY_ID)

        new_images = await self.image_service.save_uploads(images)

        # Falsy values (0, empty strings) never overwrite the stored value
        for field in MERGEABLE_FIELDS:
            value = getattr(property_data, field)
            if value:
                setattr(property_obj, field, value)

        # Featured can be switched on here but never off
        property_obj.featured = bool(property_data.featured) or property_obj.featured

        if property_data.features is not None:
            property_obj.features = list(property_data.features)

        if new_images:
            property_obj.images = [*property_obj.images, *new_images]

        try:
            property_obj = await self.property_repo.save(property_obj)
        except IntegrityError:
            self.image_service.delete_images(new_images)
            raise DuplicateKeyError(DUPLICATE_PROPERTY_ID)
        except Exception:
            self.image_service.delete_images(new_images)
            raise

        logger.info(f"Property updated: {property_obj.id}")
        return property_obj

    async def delete_property(self, property_id: uuid.UUID) -> None:
        """
        Delete a property, then remove its image files best effort.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.get_property(property_id)
        image_paths = list(property_obj.images)

        await self.property_repo.delete(property_obj.id)
        removed = self.image_service.delete_images(image_paths)

        logger.info(f"Property deleted: {property_id} ({removed} image file(s) removed)")

    async def delete_property_image(self, property_id: uuid.UUID, image_index: str) -> Property:
        """
        Remove one image by position.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            InvalidIndexError: If the index is outside the image list
        """
        property_obj = await self.get_property(property_id)
        index = ValidationUtils.parse_image_index(image_index, len(property_obj.images))

        images = list(property_obj.images)
        removed_path = images.pop(index)
        self.image_service.delete_image(removed_path)

        property_obj.images = images
        property_obj = await self.property_repo.save(property_obj)

        logger.info(f"Removed image {index} from property {property_id}")
        return property_obj

    async def search_properties(self, filters: PropertySearchFilters) -> List[Property]:
        """Return every property matching the filters."""
        return await self.property_repo.search_all(filters)

    async def search_properties_paginated(
        self,
        filters: PropertySearchFilters,
        pagination: PaginationParams
    ) -> PropertyListResponse:
        """Return one page of matching properties, newest first."""
        properties, total = await self.property_repo.search(
            filters, skip=pagination.skip, limit=pagination.limit
        )
        return PropertyListResponse(
            properties=[PropertyResponse.model_validate(p) for p in properties],
            pagination=PropertyPagination.build(pagination.page, pagination.limit, total),
        )
