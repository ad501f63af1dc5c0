"""
Utility modules for the Realty Staff API.
"""

from .exceptions import (
    APIException,
    NotFoundError,
    BadRequestError,
    InvalidIdError,
    InvalidIndexError,
    DuplicateKeyError,
    PropertyNotFoundError,
    UserNotFoundError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
    TooManyFilesError,
    ServiceUnavailableError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "APIException",
    "NotFoundError",
    "BadRequestError",
    "InvalidIdError",
    "InvalidIndexError",
    "DuplicateKeyError",
    "PropertyNotFoundError",
    "UserNotFoundError",
    "UnsupportedFileTypeError",
    "FileSizeExceededError",
    "TooManyFilesError",
    "ServiceUnavailableError",
]
