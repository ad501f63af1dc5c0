"""
Pydantic schemas for staff user requests and responses.
The password is accepted on input only; no response schema has a field for it.
"""

from pydantic import EmailStr, Field, computed_field, field_validator
from typing import Any, List, Optional
from datetime import datetime
import uuid

from realty_api.models.user import Department, UserRole
from realty_api.schemas.common import CamelModel, UserPagination
from realty_api.utils.file_utils import build_image_url
from realty_api.utils.validators import ValidationUtils

BIO_MAX_LENGTH = 500


def normalize_email(v: Any) -> Any:
    """Lowercase an email and check it before EmailStr sees it."""
    if not isinstance(v, str):
        return v
    email = v.strip().lower()
    if not ValidationUtils.is_valid_email(email):
        raise ValueError("Please enter a valid email")
    return email


def check_bio(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) > BIO_MAX_LENGTH:
        raise ValueError(f"Bio cannot exceed {BIO_MAX_LENGTH} characters")
    return v


class UserCreate(CamelModel):
    """Schema for creating a new user."""

    name: str = Field(..., examples=["Ayesha Khan"])
    email: EmailStr = Field(..., examples=["ayesha@example.com"])
    phone: Optional[str] = None
    role: UserRole = UserRole.AGENT
    department: Department = Department.SALES
    bio: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    password: Optional[str] = Field(None, description="Write-only; stored hashed")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any):
        if isinstance(v, str) and not v.strip():
            raise ValueError("Email is required")
        return normalize_email(v)

    @field_validator("phone")
    @classmethod
    def strip_phone(cls, v: Optional[str]):
        return v.strip() if v else v

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v: Optional[str]):
        return check_bio(v)

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, v: Any):
        """Skills may be a list, a serialized list or a single plain value."""
        return [skill.strip() for skill in ValidationUtils.parse_string_list_lenient(v)]


class UserUpdate(CamelModel):
    """Schema for updating an existing user. All fields are optional."""

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None
    department: Optional[Department] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any):
        if v is None:
            return None
        return normalize_email(v)

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v: Optional[str]):
        return check_bio(v)

    @field_validator("skills", mode="before")
    @classmethod
    def parse_skills(cls, v: Any):
        if v is None:
            return None
        return [skill.strip() for skill in ValidationUtils.parse_string_list_lenient(v)]


class UserResponse(CamelModel):
    """Schema for user responses."""

    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    department: Department
    bio: Optional[str] = None
    skills: List[str]
    images: List[str]
    is_active: bool
    date_joined: datetime
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="imageUrls")
    @property
    def image_urls(self) -> List[str]:
        """Absolute URLs for the stored image paths."""
        return [build_image_url(path) for path in self.images]


class UserListResponse(CamelModel):
    """Schema for a page of users."""

    users: List[UserResponse]
    pagination: UserPagination


class UserSearchInfo(CamelModel):
    """Echo of the effective search parameters."""

    query: str = ""
    role: str = "all"
    department: str = "all"
    total_results: int


class UserSearchResponse(CamelModel):
    """Schema for user search results."""

    users: List[UserResponse]
    search_info: UserSearchInfo
    pagination: UserPagination


class UserImagesResponse(CamelModel):
    """Remaining images after an image delete."""

    message: str
    images: List[str]
