"""
Property management API endpoints for CRUD operations, search and pagination.
Specific paths (/paginated, /featured, /search) are declared before /{property_id}.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from typing import Optional, List

from realty_api.services.property import PropertyService
from realty_api.services.error_handler import ERROR_RESPONSES
from realty_api.schemas.common import MessageResponse, PaginationParams
from realty_api.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    PropertySearchFilters,
)
from realty_api.utils.dependencies import (
    get_pagination,
    get_property_search_filters,
    get_property_service,
)
from realty_api.utils.validators import ValidationUtils, compact


router = APIRouter(prefix="/properties", tags=["Properties"], responses=ERROR_RESPONSES)


def to_response(properties) -> List[PropertyResponse]:
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get("", response_model=List[PropertyResponse], summary="List all properties")
@router.get("/", response_model=List[PropertyResponse], include_in_schema=False)
async def list_properties(
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """Return every property."""
    return to_response(await property_service.list_properties())


@router.get("/paginated", response_model=PropertyListResponse, summary="List properties page by page")
async def list_properties_paginated(
    pagination: PaginationParams = Depends(get_pagination),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    """Return one page of properties, newest first, with pagination metadata."""
    return await property_service.list_properties_paginated(pagination)


@router.get("/featured", response_model=List[PropertyResponse], summary="List featured properties")
async def list_featured_properties(
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    return to_response(await property_service.list_featured_properties())


@router.get("/search", response_model=List[PropertyResponse], summary="Search properties")
async def search_properties(
    filters: PropertySearchFilters = Depends(get_property_search_filters),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """
    Search by location substring, exact property type, minimum bedrooms and bathrooms,
    and an inclusive price range. Every filter is optional.
    """
    return to_response(await property_service.search_properties(filters))


@router.get("/search/paginated", response_model=PropertyListResponse, summary="Search properties page by page")
async def search_properties_paginated(
    filters: PropertySearchFilters = Depends(get_property_search_filters),
    pagination: PaginationParams = Depends(get_pagination),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    return await property_service.search_properties_paginated(filters, pagination)


@router.get("/{property_id}", response_model=PropertyResponse, summary="Get property by ID")
async def get_property(
    property_id: str,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    record_id = ValidationUtils.parse_record_id(property_id, "Property")
    property_obj = await property_service.get_property(record_id)
    return PropertyResponse.model_validate(property_obj)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property"
)
@router.post("/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_property(
    property_id: Optional[str] = Form(None, alias="propertyId"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    house_number: Optional[str] = Form(None, alias="houseNumber"),
    block_number: Optional[str] = Form(None, alias="blockNumber"),
    property_type: Optional[str] = Form(None, alias="propertyType"),
    bedrooms: Optional[str] = Form(None),
    bathrooms: Optional[str] = Form(None),
    garage: Optional[str] = Form(None),
    area_size: Optional[str] = Form(None, alias="areaSize"),
    year_built: Optional[str] = Form(None, alias="yearBuilt"),
    featured: Optional[str] = Form(None),
    features: Optional[str] = Form(None, description="JSON array of feature names"),
    images: Optional[List[UploadFile]] = File(None),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Create a property from a multipart form.
    Up to 10 images of at most 10MB each may be attached under the `images` field.
    """
    property_data = PropertyCreate.model_validate(compact(
        propertyId=property_id,
        title=title,
        description=description,
        price=price,
        location=location,
        houseNumber=house_number,
        blockNumber=block_number,
        propertyType=property_type,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        garage=garage,
        areaSize=area_size,
        yearBuilt=year_built,
        featured=featured,
        features=features,
    ))
    property_obj = await property_service.create_property(property_data, images)
    return PropertyResponse.model_validate(property_obj)


@router.put("/{property_id}", response_model=PropertyResponse, summary="Update property")
async def update_property(
    property_id: str,
    new_property_id: Optional[str] = Form(None, alias="propertyId"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    house_number: Optional[str] = Form(None, alias="houseNumber"),
    block_number: Optional[str] = Form(None, alias="blockNumber"),
    property_type: Optional[str] = Form(None, alias="propertyType"),
    bedrooms: Optional[str] = Form(None),
    bathrooms: Optional[str] = Form(None),
    garage: Optional[str] = Form(None),
    area_size: Optional[str] = Form(None, alias="areaSize"),
    year_built: Optional[str] = Form(None, alias="yearBuilt"),
    featured: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Update a property. Only non-empty values replace stored ones and
    new images are appended to the existing list.
    """
    record_id = ValidationUtils.parse_record_id(property_id, "Property")
    property_data = PropertyUpdate.model_validate(compact(
        propertyId=new_property_id,
        title=title,
        description=description,
        price=price,
        location=location,
        houseNumber=house_number,
        blockNumber=block_number,
        propertyType=property_type,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        garage=garage,
        areaSize=area_size,
        yearBuilt=year_built,
        featured=featured,
        features=features,
    ))
    property_obj = await property_service.update_property(record_id, property_data, images)
    return PropertyResponse.model_validate(property_obj)


@router.delete("/{property_id}", response_model=MessageResponse, summary="Delete property")
async def delete_property(
    property_id: str,
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    """Delete a property and, best effort, its image files."""
    record_id = ValidationUtils.parse_record_id(property_id, "Property")
    await property_service.delete_property(record_id)
    return MessageResponse(message="Property removed")


@router.delete(
    "/{property_id}/images/{image_index}",
    response_model=PropertyResponse,
    summary="Delete one property image"
)
async def delete_property_image(
    property_id: str,
    image_index: str,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    record_id = ValidationUtils.parse_record_id(property_id, "Property")
    property_obj = await property_service.delete_property_image(record_id, image_index)
    return PropertyResponse.model_validate(property_obj)
