"""
Pydantic schemas for request/response validation.
"""

from .common import (
    CamelModel,
    PaginationParams,
    PropertyPagination,
    UserPagination,
    MessageResponse,
    NotFoundResponse
)

# Property schemas
from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    PropertySearchFilters
)

# User schemas
from .user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    UserSearchInfo,
    UserSearchResponse,
    UserImagesResponse
)

__all__ = [
    # Shared
    "CamelModel",
    "PaginationParams",
    "PropertyPagination",
    "UserPagination",
    "MessageResponse",
    "NotFoundResponse",

    # Property
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyListResponse",
    "PropertySearchFilters",

    # User
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserListResponse",
    "UserSearchInfo",
    "UserSearchResponse",
    "UserImagesResponse",
]
