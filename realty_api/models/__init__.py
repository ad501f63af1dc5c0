"""
Database models for the Realty Staff API.
Includes the Property and User models with their enumerations.
"""

from realty_api.models.user import User, UserRole, Department
from realty_api.models.property import Property, PropertyType

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Department",
    "Property",
    "PropertyType",
]
