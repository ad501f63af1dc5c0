"""
Custom exception classes for the Realty Staff API.
Every failure a service can signal maps to one HTTP status and error code.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )


class InvalidIdError(BadRequestError):
    """Malformed record identifier."""

    def __init__(self, resource: str):
        super().__init__(f"Invalid {resource.lower()} ID format", error_code="INVALID_ID")


class InvalidIndexError(BadRequestError):
    """Image index outside the current image list."""

    def __init__(self, detail: str = "Invalid image index"):
        super().__init__(detail, error_code="INVALID_INDEX")


class DuplicateKeyError(BadRequestError):
    """Unique field already used by another record."""

    def __init__(self, detail: str):
        super().__init__(detail, error_code="DUPLICATE_KEY")


# Property and user specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self, property_id: Optional[str] = None):
        super().__init__("Property", property_id)


class UserNotFoundError(NotFoundError):
    """User not found exception."""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User", user_id)


# File upload exceptions
class UnsupportedFileTypeError(BadRequestError):
    """Upload that is not an image."""

    def __init__(self, detail: str = "Only image files are allowed!"):
        super().__init__(detail, error_code="UNSUPPORTED_FILE_TYPE")


class FileSizeExceededError(BadRequestError):
    """Upload larger than the per-resource limit."""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File too large: {size} bytes exceeds maximum allowed size {max_size} bytes",
            error_code="FILE_TOO_LARGE"
        )
        self.size = size
        self.max_size = max_size


class TooManyFilesError(BadRequestError):
    """More uploads in one request than the per-resource limit."""

    def __init__(self, count: int, max_count: int):
        super().__init__(
            f"Too many files uploaded: {count} (maximum: {max_count})",
            error_code="TOO_MANY_FILES"
        )


# Service unavailable exceptions
class ServiceUnavailableError(APIException):
    """Service unavailable exception."""

    def __init__(self, detail: str = "Service temporarily unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code="SERVICE_UNAVAILABLE"
        )
