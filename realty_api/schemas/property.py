"""
Pydantic schemas for property requests and responses.
Handles property create/update payloads, search filters and paginated listings.
"""

from pydantic import Field, ValidationInfo, computed_field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional
from datetime import datetime
import uuid

from realty_api.models.property import PropertyType
from realty_api.schemas.common import CamelModel, PropertyPagination
from realty_api.utils.file_utils import build_image_url
from realty_api.utils.validators import ValidationUtils


REQUIRED_TEXT_FIELDS = ("property_id", "title", "description", "location", "house_number", "block_number", "area_size")


class PropertyCreate(CamelModel):
    """Schema for creating a new property."""

    property_id: str = Field(..., description="External business identifier", examples=["PROP-001"])
    title: str = Field(..., examples=["Modern family house"])
    description: str
    price: float = Field(..., examples=[250000])
    location: str = Field(..., examples=["DHA Phase 5, Lahore"])
    house_number: str
    block_number: str
    property_type: PropertyType
    bedrooms: int
    bathrooms: int
    garage: int
    area_size: str = Field(..., examples=["10 Marla"])
    year_built: int
    featured: bool = False
    features: List[str] = Field(default_factory=list)

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def validate_required_text(cls, v: str, info: ValidationInfo):
        """Blank strings count as missing."""
        if not v or not v.strip():
            raise ValueError(f"{to_camel(info.field_name)} is required")
        return v.strip()

    @field_validator("featured", mode="before")
    @classmethod
    def parse_featured(cls, v: Any):
        """Only the literal "true" (or a real true) turns the flag on."""
        return ValidationUtils.parse_featured_flag(v)

    @field_validator("features", mode="before")
    @classmethod
    def parse_features(cls, v: Any):
        """Features arrive as a serialized JSON array."""
        if v is None:
            return []
        return ValidationUtils.parse_string_list_strict(v, "features")


class PropertyUpdate(CamelModel):
    """
    Schema for updating an existing property.
    Every field is optional; the service decides which provided values are applied.
    """

    property_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    location: Optional[str] = None
    house_number: Optional[str] = None
    block_number: Optional[str] = None
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    garage: Optional[int] = None
    area_size: Optional[str] = None
    year_built: Optional[int] = None
    featured: Optional[bool] = None
    features: Optional[List[str]] = None

    @field_validator("featured", mode="before")
    @classmethod
    def parse_featured(cls, v: Any):
        if v is None:
            return None
        return ValidationUtils.parse_featured_flag(v)

    @field_validator("features", mode="before")
    @classmethod
    def parse_features(cls, v: Any):
        if v is None:
            return None
        return ValidationUtils.parse_string_list_strict(v, "features")


class PropertyResponse(CamelModel):
    """Schema for property responses."""

    id: uuid.UUID
    property_id: str
    title: str
    description: str
    price: float
    location: str
    house_number: str
    block_number: str
    images: List[str]
    property_type: PropertyType
    bedrooms: int
    bathrooms: int
    garage: int
    area_size: str
    year_built: int
    featured: bool
    features: List[str]
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="imageUrls")
    @property
    def image_urls(self) -> List[str]:
        """Absolute URLs for the stored image paths."""
        return [build_image_url(path) for path in self.images]


class PropertyListResponse(CamelModel):
    """Schema for a page of properties."""

    properties: List[PropertyResponse]
    pagination: PropertyPagination


class PropertySearchFilters(CamelModel):
    """
    Optional search filters.
    `property_type` stays a plain string so an unknown type simply matches nothing.
    """

    location: Optional[str] = None
    property_type: Optional[str] = None
    bedrooms: Optional[int] = Field(None, description="Minimum number of bedrooms")
    bathrooms: Optional[int] = Field(None, description="Minimum number of bathrooms")
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def empty_as_missing(cls, v: Any):
        """Empty query values are ignored."""
        if isinstance(v, str) and not v.strip():
            return None
        return v
