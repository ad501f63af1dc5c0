"""
Repository layer for data access operations.
"""

from realty_api.repositories.base import BaseRepository
from realty_api.repositories.property import PropertyRepository
from realty_api.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "UserRepository",
]
