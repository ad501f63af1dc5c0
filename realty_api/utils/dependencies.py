"""
FastAPI dependency injection utilities.
Provides services bound to the request's database session and parsed query parameters.
"""

from typing import Optional
from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from realty_api.config import settings
from realty_api.database import get_db
from realty_api.schemas.common import PaginationParams
from realty_api.schemas.property import PropertySearchFilters
from realty_api.services.property import PropertyService
from realty_api.services.user import UserService
from realty_api.utils.validators import ValidationUtils


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session

    Returns:
        PropertyService instance
    """
    return PropertyService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    """
    Get user service instance.

    Args:
        db: Database session

    Returns:
        UserService instance
    """
    return UserService(db)


def get_pagination(
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    limit: Optional[str] = Query(None, description="Number of items per page"),
) -> PaginationParams:
    """
    Page and limit query parameters.
    Missing, non-numeric or non-positive values fall back to the defaults;
    limit is capped at the configured maximum.
    """
    return PaginationParams(
        page=ValidationUtils.parse_positive_int(page, 1),
        limit=min(
            ValidationUtils.parse_positive_int(limit, settings.default_page_size),
            settings.max_page_size,
        ),
    )


def get_property_search_filters(
    location: Optional[str] = Query(None, description="Case-insensitive substring of the location"),
    property_type: Optional[str] = Query(None, alias="propertyType"),
    bedrooms: Optional[str] = Query(None, description="Minimum number of bedrooms"),
    bathrooms: Optional[str] = Query(None, description="Minimum number of bathrooms"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
) -> PropertySearchFilters:
    """
    Property search filters from the query string.
    Values are received as text so empty parameters can be ignored.
    """
    return PropertySearchFilters(
        location=location,
        property_type=property_type,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_price=min_price,
        max_price=max_price,
    )
