"""
Service layer for business logic implementation.
Contains services for property and user management, image storage and error handling.
"""

from .property import PropertyService
from .user import UserService
from .image import ImageService
from .error_handler import ErrorHandlerService

__all__ = [
    "PropertyService",
    "UserService",
    "ImageService",
    "ErrorHandlerService"
]
